# backend/beautyplaza/repositories/appointment_repository.py
"""
Appointment Repository for the Beauty Plaza platform.

Implements data access for appointment management:
- Appointment CRUD operations
- Customer, technician and date scoped listings
- Slot occupancy checks used by the booking orchestrator

Every listing is ordered by appointment date, then time.
"""

from datetime import date
import logging
from typing import Any, List, cast

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException
from ..models.appointment import Appointment
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AppointmentRepository(BaseRepository[Appointment]):
    """Repository for appointment data access."""

    def __init__(self, db: Session):
        """Initialize with Appointment model."""
        super().__init__(db, Appointment)
        self.logger = logging.getLogger(__name__)

    def create(self, **kwargs: Any) -> Appointment:
        """Create an appointment, exposing integrity errors for conflict handling."""
        try:
            return super().create(**kwargs)
        except RepositoryException as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise exc.__cause__
            raise

    def _ordered(self, query: Query) -> Query:
        return query.order_by(Appointment.appointment_date, Appointment.appointment_time)

    def list_all(self) -> List[Appointment]:
        """All appointments in schedule order."""
        return cast(List[Appointment], self._execute_query(self._ordered(self._build_query())))

    def list_by_customer(self, customer_id: str) -> List[Appointment]:
        """Appointments booked by a customer."""
        query = self._build_query().filter(Appointment.customer_id == customer_id)
        return cast(List[Appointment], self._execute_query(self._ordered(query)))

    def list_by_technician(self, technician_id: str) -> List[Appointment]:
        """Appointments assigned to a technician."""
        query = self._build_query().filter(Appointment.technician_id == technician_id)
        return cast(List[Appointment], self._execute_query(self._ordered(query)))

    def list_by_date(self, appointment_date: date) -> List[Appointment]:
        """Appointments on a calendar date."""
        query = self._build_query().filter(Appointment.appointment_date == appointment_date)
        return cast(List[Appointment], self._execute_query(self._ordered(query)))

