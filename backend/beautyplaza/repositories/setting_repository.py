# backend/beautyplaza/repositories/setting_repository.py
"""
Settings Repository for the Beauty Plaza platform.

Settings are keyed by their string ``key`` rather than a surrogate id.
"""

from typing import Any, List

from sqlalchemy.orm import Session

from ..models.setting import Setting
from .base_repository import BaseRepository


class SettingRepository(BaseRepository[Setting]):
    """Repository for application settings."""

    def __init__(self, db: Session):
        super().__init__(db, Setting)

    def _primary_key_column(self) -> Any:
        return Setting.key

    def list_settings(self) -> List[Setting]:
        return self._execute_query(self._build_query().order_by(Setting.category, Setting.key))
