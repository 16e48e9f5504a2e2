"""
Domain models for weekly availability, appointments and time ranges.
"""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Tuple

from pendulum import DateTime


class Weekday(str, Enum):
    """Canonical day-of-week names, indexed 0=Sunday through 6=Saturday."""
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        """Map a Sunday-first weekday index (0-6) to its name."""
        return list(cls)[index]

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        """
        Derive the weekday from a calendar date.

        ``date.weekday()`` is Monday-first and locale independent; it is
        shifted so that Sunday lands on index 0.
        """
        return cls.from_index((value.weekday() + 1) % 7)


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range [start, end).

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another. Touching ranges do not."""
        return self.start < other.end and self.end > other.start

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class TimeWindow:
    """
    A contiguous working-hours interval within a day, e.g. 09:00-12:00.

    Upstream configuration does not guarantee ``start < end``; degenerate
    windows can be built and are skipped by the slot generator.
    """
    start: time
    end: time

    @classmethod
    def parse(cls, start: str, end: str) -> "TimeWindow":
        """Build a window from two ``HH:MM`` strings."""
        return cls(start=parse_clock_time(start), end=parse_clock_time(end))

    def is_degenerate(self) -> bool:
        return self.start >= self.end

    def __str__(self) -> str:
        return f"{self.start.strftime('%H:%M')}-{self.end.strftime('%H:%M')}"


@dataclass(frozen=True)
class DaySchedule:
    """
    Working windows for one day of the week.

    Windows may be unsorted and non-contiguous (morning + afternoon shift).
    When ``is_available`` is false the windows are ignored.
    """
    is_available: bool
    windows: Tuple[TimeWindow, ...] = ()

    @classmethod
    def closed(cls) -> "DaySchedule":
        return cls(is_available=False)

    def active_windows(self) -> Tuple[TimeWindow, ...]:
        if not self.is_available:
            return ()
        return self.windows


@dataclass(frozen=True)
class WeeklyAvailability:
    """
    A professional's weekly schedule with exactly one entry per weekday.

    Use ``from_days`` to build one from a partial mapping; missing days
    default to closed.
    """
    days: Mapping[Weekday, DaySchedule]

    def __post_init__(self):
        missing = [day.value for day in Weekday if day not in self.days]
        if missing:
            raise ValueError(f"Weekly availability is missing days: {', '.join(missing)}")

    @classmethod
    def from_days(cls, days: Mapping[Weekday, DaySchedule]) -> "WeeklyAvailability":
        filled: Dict[Weekday, DaySchedule] = {
            day: days.get(day, DaySchedule.closed()) for day in Weekday
        }
        return cls(days=filled)

    @classmethod
    def closed_all_week(cls) -> "WeeklyAvailability":
        return cls.from_days({})

    def schedule_for(self, weekday: Weekday) -> DaySchedule:
        return self.days.get(weekday, DaySchedule.closed())


@dataclass(frozen=True)
class Service:
    """A bookable service offered by a professional."""
    name: str
    duration_minutes: int


def total_duration(services: Iterable[Service]) -> int:
    """
    Sum the durations of all services selected for one booking.

    A multi-service booking occupies one continuous block.
    """
    return sum(service.duration_minutes for service in services)


class AppointmentStatus(str, Enum):
    """Appointment lifecycle states. Every state except cancelled blocks its interval."""
    PENDING = "pending"
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        return self is not AppointmentStatus.CANCELLED


@dataclass(frozen=True)
class ExistingAppointment:
    """An already-booked appointment for a single professional on a single date."""
    start: DateTime
    end: DateTime
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    professional_id: str = ""

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    def blocks(self, slot: TimeRange) -> bool:
        """
        Check whether this appointment intersects ``slot`` (both half-open).

        Compares the raw bounds, so a zero-length appointment only blocks
        slots that strictly contain it.
        """
        return slot.start < self.end and slot.end > self.start


@dataclass
class Professional:
    """
    A single serial resource: one professional with a weekly schedule.
    """
    id: str
    name: str
    availability: WeeklyAvailability = field(default_factory=WeeklyAvailability.closed_all_week)
    slot_interval_minutes: int = 15
    services: List[Service] = field(default_factory=list)

    def find_service(self, name: str) -> Service | None:
        """Find a service by name (case-insensitive)."""
        for service in self.services:
            if service.name.lower() == name.lower():
                return service
        return None


def parse_clock_time(value: str) -> time:
    """
    Parse an ``HH:MM`` string into a time of day.

    Raises:
        ValueError: If the string is not a valid 24h clock time
    """
    parts = value.strip().split(":")
    if len(parts) != 2 or not all(part.isdigit() for part in parts):
        raise ValueError(f"Expected a time in HH:MM format, got '{value}'")
    hour, minute = int(parts[0]), int(parts[1])
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Time out of range: '{value}'")
    return time(hour=hour, minute=minute)
