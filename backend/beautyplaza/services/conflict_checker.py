# backend/beautyplaza/services/conflict_checker.py
"""
Conflict Checker Service for the Beauty Plaza platform.

Decides whether a technician can be booked at a date and time, and lists
the free display slots for a day. Two modes:

- ``exact`` (default): only an appointment at the identical start time
  conflicts, whatever its status. This mirrors the storage unique constraint.
- ``overlap``: half-open intervals ``[start, start + duration)`` may not
  overlap, using each appointment's service duration.

Slot listing and booking share the same predicate in both modes.
"""

from datetime import date, datetime, time
import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..repositories.conflict_checker_repository import ConflictCheckerRepository
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)

EXACT_MODE = "exact"
OVERLAP_MODE = "overlap"


def _minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def _parse_hhmm(value: str) -> time:
    return datetime.strptime(value, "%H:%M").time()


def intervals_overlap(start_a: int, length_a: int, start_b: int, length_b: int) -> bool:
    """Half-open interval overlap on minute offsets."""
    return start_a < start_b + length_b and start_b < start_a + length_a


class ConflictChecker(BaseService):
    """
    Service for checking technician double-booking and free slots.
    """

    def __init__(
        self,
        db: Session,
        repository: Optional[ConflictCheckerRepository] = None,
        *,
        mode: Optional[str] = None,
        open_time: Optional[time] = None,
        close_time: Optional[time] = None,
        interval_minutes: Optional[int] = None,
    ):
        """
        Initialize conflict checker service.

        Args:
            db: Database session
            repository: Optional ConflictCheckerRepository instance
            mode: "exact" or "overlap"; defaults to the configured mode
        """
        super().__init__(db)
        self.logger = logging.getLogger(__name__)
        self.repository = repository or RepositoryFactory.create_conflict_checker_repository(db)
        self.mode = mode or settings.conflict_mode
        if self.mode not in (EXACT_MODE, OVERLAP_MODE):
            raise ValueError(f"Unknown conflict mode: {self.mode}")
        self.open_time = open_time or _parse_hhmm(settings.slot_open_time)
        self.close_time = close_time or _parse_hhmm(settings.slot_close_time)
        self.interval_minutes = interval_minutes or settings.slot_interval_minutes

    @property
    def is_duration_aware(self) -> bool:
        return self.mode == OVERLAP_MODE

    def _candidate_duration(self, duration_minutes: Optional[int]) -> int:
        return duration_minutes if duration_minutes and duration_minutes > 0 else self.interval_minutes

    def _collides(
        self,
        schedule: Iterable[Tuple[str, time, int]],
        candidate: time,
        duration_minutes: Optional[int],
    ) -> bool:
        if not self.is_duration_aware:
            return any(start == candidate for _, start, _ in schedule)

        candidate_start = _minutes(candidate)
        candidate_length = self._candidate_duration(duration_minutes)
        return any(
            intervals_overlap(candidate_start, candidate_length, _minutes(start), length)
            for _, start, length in schedule
        )

    @BaseService.measure_operation("has_conflict")
    def has_conflict(
        self,
        technician_id: str,
        appointment_date: date,
        appointment_time: time,
        exclude_appointment_id: Optional[str] = None,
        duration_minutes: Optional[int] = None,
    ) -> bool:
        """
        Check whether booking the technician at this date and time would collide.

        Args:
            technician_id: Technician to book
            appointment_date: Calendar date
            appointment_time: Start time
            exclude_appointment_id: Appointment being rescheduled, ignored in the check
            duration_minutes: Service duration (overlap mode only)

        Returns:
            True if another appointment occupies the slot
        """
        if not self.is_duration_aware:
            conflict = self.repository.slot_taken(
                technician_id, appointment_date, appointment_time, exclude_appointment_id
            )
        else:
            schedule = self.repository.get_day_schedule(
                technician_id, appointment_date, exclude_appointment_id
            )
            conflict = self._collides(schedule, appointment_time, duration_minutes)

        if conflict:
            self.logger.info(
                f"Slot conflict for technician {technician_id} on {appointment_date} "
                f"at {appointment_time.strftime('%H:%M')} ({self.mode} mode)"
            )
        return conflict

    def slot_grid(self) -> List[time]:
        """Display grid from opening time to closing time (inclusive when on the stride)."""
        grid: List[time] = []
        current = _minutes(self.open_time)
        closing = _minutes(self.close_time)
        while current <= closing:
            grid.append(time(current // 60, current % 60))
            current += self.interval_minutes
        return grid

    @BaseService.measure_operation("available_slots")
    def available_slots(
        self,
        technician_id: str,
        appointment_date: date,
        duration_minutes: Optional[int] = None,
    ) -> List[time]:
        """
        List free start times for a technician on a date.

        Every returned slot passes ``has_conflict`` with the same mode and duration.
        """
        schedule = self.repository.get_day_schedule(technician_id, appointment_date)
        return [
            slot
            for slot in self.slot_grid()
            if not self._collides(schedule, slot, duration_minutes)
        ]
