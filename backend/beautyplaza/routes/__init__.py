# Route modules; ``main`` mounts everything except auth, health and metrics under /api
from . import (
    appointments as appointments,
    auth as auth,
    gift_cards as gift_cards,
    health as health,
    loyalty_points as loyalty_points,
    prometheus as prometheus,
    promotions as promotions,
    referrals as referrals,
    services as services,
    settings as settings,
    technicians as technicians,
    users as users,
)
