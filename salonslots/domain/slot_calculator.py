"""
Core business logic for calculating bookable appointment slots.

This is the heart of the application - pure domain logic without any
external dependencies (no database, no I/O).
"""

import logging
from datetime import date, datetime
from typing import Iterable, List, Sequence

import pendulum
from pendulum import DateTime

from .exceptions import InvalidDuration, InvalidStep
from .models import ExistingAppointment, TimeRange, TimeWindow

logger = logging.getLogger(__name__)

DEFAULT_STEP_MINUTES = 15


class SlotCalculator:
    """
    Calculates bookable start times for a single professional on one day.

    Algorithm:
    1. For each working window, walk a cursor from the window start in
       fixed steps while the service still fits before the window end
    2. Drop cursors that are already in the past
    3. Reject candidates that overlap an existing appointment
    4. Return the remaining start times in ascending order

    The step never depends on the service duration: duration-sized steps
    skip valid start times and make the slot grid depend on which services
    were selected.
    """

    def __init__(self, timezone: str = "UTC", step_minutes: int = DEFAULT_STEP_MINUTES):
        _validate_step(step_minutes)
        self.timezone = timezone
        self.step_minutes = step_minutes

    def find_available_slots(
        self,
        windows: Sequence[TimeWindow],
        duration_minutes: int,
        target_date: date,
        existing_appointments: Iterable[ExistingAppointment],
        now: datetime | None = None,
        step_minutes: int | None = None,
    ) -> List[DateTime]:
        """
        Generate candidates and filter out the occupied ones in one call.
        """
        candidates = self.generate_candidate_slots(
            windows=windows,
            duration_minutes=duration_minutes,
            target_date=target_date,
            now=now,
            step_minutes=step_minutes,
        )
        return self.filter_available(
            candidates=candidates,
            duration_minutes=duration_minutes,
            existing_appointments=existing_appointments,
        )

    def generate_candidate_slots(
        self,
        windows: Sequence[TimeWindow],
        duration_minutes: int,
        target_date: date,
        now: datetime | None = None,
        step_minutes: int | None = None,
    ) -> List[DateTime]:
        """
        Enumerate candidate start times within the working windows.

        Args:
            windows: Working windows for the day, in any order
            duration_minutes: Length of the booking in minutes
            target_date: Calendar date to generate slots for
            now: Current instant; start times before it are excluded
            step_minutes: Granularity override (defaults to the calculator's step)

        Returns:
            Sorted list of candidate start times

        Raises:
            InvalidDuration: If duration_minutes is not positive
            InvalidStep: If step_minutes is not positive
        """
        validate_duration(duration_minutes)
        step = self.step_minutes if step_minutes is None else step_minutes
        _validate_step(step)

        current = self._normalize_now(now)
        today = current.in_timezone(self.timezone).date()

        if target_date < today:
            return []

        candidates: set[DateTime] = set()

        for window in windows:
            if window.is_degenerate():
                logger.debug("Skipping degenerate window %s on %s", window, target_date)
                continue

            candidates.update(
                self._slots_in_window(window, duration_minutes, target_date, current, step)
            )

        return sorted(candidates)

    def filter_available(
        self,
        candidates: Iterable[DateTime],
        duration_minutes: int,
        existing_appointments: Iterable[ExistingAppointment],
    ) -> List[DateTime]:
        """
        Drop candidates whose [start, start + duration) interval intersects
        any appointment's [start, end) interval.

        Candidates that end exactly when an appointment starts, or start
        exactly when one ends, are kept. Input order is preserved.
        """
        validate_duration(duration_minutes)

        appointments = list(existing_appointments)
        available: List[DateTime] = []

        for start in candidates:
            slot = TimeRange(start=start, end=start.add(minutes=duration_minutes))
            if any(appointment.blocks(slot) for appointment in appointments):
                continue
            available.append(start)

        return available

    def _slots_in_window(
        self,
        window: TimeWindow,
        duration_minutes: int,
        target_date: date,
        now: DateTime,
        step_minutes: int,
    ) -> List[DateTime]:
        """
        Walk one window in fixed steps.

        Past start times are skipped without stopping the walk, since later
        cursors in the same window may still be in the future.
        """
        slots: List[DateTime] = []
        cursor = self._at(target_date, window.start)
        window_end = self._at(target_date, window.end)

        while cursor.add(minutes=duration_minutes) <= window_end:
            if cursor >= now:
                slots.append(cursor)
            cursor = cursor.add(minutes=step_minutes)

        return slots

    def _at(self, target_date: date, clock) -> DateTime:
        return pendulum.datetime(
            target_date.year,
            target_date.month,
            target_date.day,
            clock.hour,
            clock.minute,
            tz=self.timezone,
        )

    def _normalize_now(self, now: datetime | None) -> DateTime:
        if now is None:
            return pendulum.now(self.timezone)
        # Naive datetimes are read as wall-clock time in the calculator's timezone
        return pendulum.instance(now, tz=self.timezone)


def validate_duration(duration_minutes: int) -> None:
    if duration_minutes <= 0:
        raise InvalidDuration(f"Duration must be a positive number of minutes, got {duration_minutes}")


def _validate_step(step_minutes: int) -> None:
    if step_minutes <= 0:
        raise InvalidStep(f"Step must be a positive number of minutes, got {step_minutes}")
