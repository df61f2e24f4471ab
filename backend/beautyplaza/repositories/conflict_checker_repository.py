# backend/beautyplaza/repositories/conflict_checker_repository.py
"""
Conflict Checker Repository for the Beauty Plaza platform.

Read-only queries behind the slot/conflict checker:
- Whether a (technician, date, time) slot is already held
- The technician's appointments on a date with their service durations
"""

from datetime import date, time
import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.appointment import Appointment
from ..models.beauty_service import BeautyService

logger = logging.getLogger(__name__)


class ConflictCheckerRepository:
    """
    Repository for conflict checking data access.

    Status is not filtered: any stored appointment occupies its slot, as
    with the storage-level unique constraint.
    """

    def __init__(self, db: Session):
        """Initialize with database session."""
        self.db = db
        self.logger = logging.getLogger(__name__)

    def slot_taken(
        self,
        technician_id: str,
        appointment_date: date,
        appointment_time: time,
        exclude_appointment_id: Optional[str] = None,
    ) -> bool:
        """
        Check whether another appointment holds the exact slot.

        Args:
            technician_id: Technician to check
            appointment_date: Calendar date
            appointment_time: Start time
            exclude_appointment_id: Appointment to ignore (the one being updated)

        Returns:
            True if the slot is already held
        """
        try:
            query = self.db.query(Appointment.id).filter(
                Appointment.technician_id == technician_id,
                Appointment.appointment_date == appointment_date,
                Appointment.appointment_time == appointment_time,
            )
            if exclude_appointment_id:
                query = query.filter(Appointment.id != exclude_appointment_id)
            return query.first() is not None
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking slot for technician {technician_id}: {str(e)}")
            raise RepositoryException(f"Failed to check slot: {str(e)}") from e

    def get_day_schedule(
        self,
        technician_id: str,
        appointment_date: date,
        exclude_appointment_id: Optional[str] = None,
    ) -> List[Tuple[str, time, int]]:
        """
        Get (appointment id, start time, duration minutes) for a technician's day.

        Duration comes from the booked service.
        """
        try:
            query = (
                self.db.query(
                    Appointment.id,
                    Appointment.appointment_time,
                    BeautyService.duration_minutes,
                )
                .join(BeautyService, BeautyService.id == Appointment.service_id)
                .filter(
                    Appointment.technician_id == technician_id,
                    Appointment.appointment_date == appointment_date,
                )
            )
            if exclude_appointment_id:
                query = query.filter(Appointment.id != exclude_appointment_id)
            rows = query.order_by(Appointment.appointment_time).all()
            return [(row[0], row[1], int(row[2])) for row in rows]
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading schedule for technician {technician_id}: {str(e)}")
            raise RepositoryException(f"Failed to load schedule: {str(e)}") from e
