"""
Availability resolution: which working windows apply on a given date.
"""

from datetime import date

from .models import DaySchedule, WeeklyAvailability, Weekday


def resolve_day_schedule(
    weekly_availability: WeeklyAvailability,
    target_date: date,
) -> DaySchedule:
    """
    Return the day schedule that applies on ``target_date``.

    Unknown days are treated as closed.
    """
    weekday = Weekday.from_date(target_date)
    return weekly_availability.schedule_for(weekday)
