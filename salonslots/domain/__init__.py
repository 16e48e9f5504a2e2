"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import resolve_day_schedule
from .models import (
    AppointmentStatus,
    DaySchedule,
    ExistingAppointment,
    Professional,
    Service,
    TimeRange,
    TimeWindow,
    WeeklyAvailability,
    Weekday,
    total_duration,
)
from .slot_calculator import SlotCalculator

__all__ = [
    "AppointmentStatus",
    "DaySchedule",
    "ExistingAppointment",
    "Professional",
    "Service",
    "SlotCalculator",
    "TimeRange",
    "TimeWindow",
    "WeeklyAvailability",
    "Weekday",
    "resolve_day_schedule",
    "total_duration",
]
