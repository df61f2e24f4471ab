# backend/beautyplaza/repositories/beauty_service_repository.py
"""
Service catalog repository for the Beauty Plaza platform.
"""

from typing import List

from sqlalchemy.orm import Session

from ..models.beauty_service import BeautyService
from .base_repository import BaseRepository


class BeautyServiceRepository(BaseRepository[BeautyService]):
    """Repository for salon services offered to customers."""

    def __init__(self, db: Session):
        super().__init__(db, BeautyService)

    def list_services(self, include_inactive: bool = False) -> List[BeautyService]:
        """Catalog ordered by name; inactive services only when requested."""
        query = self._build_query()
        if not include_inactive:
            query = query.filter(BeautyService.is_active.is_(True))
        return self._execute_query(query.order_by(BeautyService.name, BeautyService.id))
