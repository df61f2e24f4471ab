# backend/beautyplaza/services/catalog_service.py
"""
Service catalog management for the Beauty Plaza platform.

Services are never hard-deleted: deleting one deactivates it so existing
appointments keep their reference.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..models.beauty_service import BeautyService
from ..repositories.beauty_service_repository import BeautyServiceRepository
from ..repositories.factory import RepositoryFactory
from ..schemas.beauty_service import BeautyServiceCreate, BeautyServiceUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


class CatalogService(BaseService):
    """CRUD over the salon's service catalog."""

    def __init__(self, db: Session, repository: Optional[BeautyServiceRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_beauty_service_repository(db)

    def _get_or_404(self, service_id: str) -> BeautyService:
        service = self.repository.get_by_id(service_id)
        if not service:
            raise NotFoundException.for_resource("Service", "id", service_id)
        return service

    @BaseService.measure_operation("list_services")
    def list_services(self, include_inactive: bool = False) -> List[BeautyService]:
        return self.repository.list_services(include_inactive=include_inactive)

    @BaseService.measure_operation("get_service")
    def get_service(self, service_id: str) -> BeautyService:
        return self._get_or_404(service_id)

    @BaseService.measure_operation("create_service")
    def create_service(self, data: BeautyServiceCreate) -> BeautyService:
        with self.transaction():
            service = self.repository.create(**data.model_dump())
        self.log_operation("create_service", service_id=service.id)
        return service

    @BaseService.measure_operation("update_service")
    def update_service(self, service_id: str, data: BeautyServiceUpdate) -> BeautyService:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        with self.transaction():
            service = self._get_or_404(service_id)
            for field, value in changes.items():
                setattr(service, field, value)
            self.repository.flush()
        self.log_operation("update_service", service_id=service_id, fields=sorted(changes))
        return service

    @BaseService.measure_operation("deactivate_service")
    def deactivate_service(self, service_id: str) -> None:
        with self.transaction():
            service = self._get_or_404(service_id)
            service.is_active = False
            self.repository.flush()
        self.log_operation("deactivate_service", service_id=service_id)
