# backend/beautyplaza/repositories/technician_repository.py
"""
Technician Repository for the Beauty Plaza platform.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.technician import Technician
from .base_repository import BaseRepository


class TechnicianRepository(BaseRepository[Technician]):
    """Repository for the technician roster."""

    def __init__(self, db: Session):
        super().__init__(db, Technician)

    def list_technicians(self, available_only: bool = False) -> List[Technician]:
        query = self._build_query()
        if available_only:
            query = query.filter(Technician.is_available.is_(True))
        return self._execute_query(query.order_by(Technician.name, Technician.id))

    def get_by_user_id(self, user_id: str) -> Optional[Technician]:
        """Technician profile linked to a user account, if any."""
        return self.find_one_by(user_id=user_id)
