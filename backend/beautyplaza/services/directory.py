# backend/beautyplaza/services/directory.py
"""
Directory lookup over customers, services and technicians.

The booking core only reads these records; a miss is reported as a
NotFoundException naming the resource the caller asked for.
"""

from typing import Optional

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..models.beauty_service import BeautyService
from ..models.technician import Technician
from ..models.user import User
from ..repositories.beauty_service_repository import BeautyServiceRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.technician_repository import TechnicianRepository
from ..repositories.user_repository import UserRepository


class DirectoryLookup:
    """Resolves booking references by id."""

    def __init__(
        self,
        db: Session,
        user_repository: Optional[UserRepository] = None,
        service_repository: Optional[BeautyServiceRepository] = None,
        technician_repository: Optional[TechnicianRepository] = None,
    ):
        self.user_repository = user_repository or RepositoryFactory.create_user_repository(db)
        self.service_repository = (
            service_repository or RepositoryFactory.create_beauty_service_repository(db)
        )
        self.technician_repository = (
            technician_repository or RepositoryFactory.create_technician_repository(db)
        )

    def find_customer(self, customer_id: str) -> User:
        customer = self.user_repository.get_by_id(customer_id)
        if not customer:
            raise NotFoundException.for_resource("Customer", "id", customer_id)
        return customer

    def find_service(self, service_id: str) -> BeautyService:
        service = self.service_repository.get_by_id(service_id)
        if not service:
            raise NotFoundException.for_resource("Service", "id", service_id)
        return service

    def find_technician(self, technician_id: str) -> Technician:
        technician = self.technician_repository.get_by_id(technician_id)
        if not technician:
            raise NotFoundException.for_resource("Technician", "id", technician_id)
        return technician
