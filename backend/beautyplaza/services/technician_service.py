# backend/beautyplaza/services/technician_service.py
"""
Technician roster management for the Beauty Plaza platform.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictException, NotFoundException, RepositoryException
from ..models.technician import Technician
from ..repositories.factory import RepositoryFactory
from ..repositories.technician_repository import TechnicianRepository
from ..repositories.user_repository import UserRepository
from ..schemas.technician import TechnicianCreate, TechnicianUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


class TechnicianService(BaseService):
    """CRUD over technicians and their link to user accounts."""

    def __init__(
        self,
        db: Session,
        repository: Optional[TechnicianRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_technician_repository(db)
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)

    def _get_or_404(self, technician_id: str) -> Technician:
        technician = self.repository.get_by_id(technician_id)
        if not technician:
            raise NotFoundException.for_resource("Technician", "id", technician_id)
        return technician

    def _validate_user_link(self, user_id: str, technician_id: Optional[str] = None) -> None:
        if not self.user_repository.get_by_id(user_id):
            raise NotFoundException.for_resource("User", "id", user_id)
        linked = self.repository.get_by_user_id(user_id)
        if linked and linked.id != technician_id:
            raise ConflictException(
                "User is already linked to another technician.", code="TECHNICIAN_USER_TAKEN"
            )

    @BaseService.measure_operation("list_technicians")
    def list_technicians(self, available_only: bool = False) -> List[Technician]:
        return self.repository.list_technicians(available_only=available_only)

    @BaseService.measure_operation("get_technician")
    def get_technician(self, technician_id: str) -> Technician:
        return self._get_or_404(technician_id)

    def find_by_user(self, user_id: str) -> Optional[Technician]:
        """Technician profile linked to a user, used for authorization."""
        return self.repository.get_by_user_id(user_id)

    @BaseService.measure_operation("create_technician")
    def create_technician(self, data: TechnicianCreate) -> Technician:
        if data.user_id:
            self._validate_user_link(data.user_id)

        with self.transaction():
            technician = self.repository.create(**data.model_dump())
        self.log_operation("create_technician", technician_id=technician.id)
        return technician

    @BaseService.measure_operation("update_technician")
    def update_technician(self, technician_id: str, data: TechnicianUpdate) -> Technician:
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        with self.transaction():
            technician = self._get_or_404(technician_id)
            if changes.get("user_id"):
                self._validate_user_link(changes["user_id"], technician_id)
            for field, value in changes.items():
                setattr(technician, field, value)
            self.repository.flush()
        self.log_operation("update_technician", technician_id=technician_id, fields=sorted(changes))
        return technician

    @BaseService.measure_operation("delete_technician")
    def delete_technician(self, technician_id: str) -> None:
        with self.transaction():
            try:
                deleted = self.repository.delete(technician_id)
            except RepositoryException as exc:
                raise ConflictException(
                    "Technician cannot be deleted while appointments reference it.",
                    code="TECHNICIAN_IN_USE",
                ) from exc
            if not deleted:
                raise NotFoundException.for_resource("Technician", "id", technician_id)
        self.log_operation("delete_technician", technician_id=technician_id)
