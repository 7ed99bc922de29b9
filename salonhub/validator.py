# salonhub/validator.py

from typing import Dict, Optional

from .schedule import DaySchedule, Weekday, WeeklySchedule

START_AFTER_END = "Start time must be before end time"
SHIFTS_OVERLAP = "Time slots cannot overlap"


def overlaps(start_a, end_a, start_b, end_b) -> bool:
    # Half-open intervals: back-to-back windows (end_a == start_b) do not overlap
    return start_a < end_b and start_b < end_a


def validate_day(day_schedule: DaySchedule) -> Optional[str]:
    """Return the first problem with a day's shifts, or None when the day is valid.

    Ordering is checked for every shift (in list order) before any pair is
    compared for overlap. A disabled day is always valid.
    """
    if not day_schedule.enabled:
        return None

    shifts = day_schedule.shifts
    for shift in shifts:
        if shift.start >= shift.end:
            return START_AFTER_END

    for i in range(len(shifts)):
        for j in range(i + 1, len(shifts)):
            if overlaps(shifts[i].start, shifts[i].end, shifts[j].start, shifts[j].end):
                return SHIFTS_OVERLAP

    return None


def validate_week(schedule: WeeklySchedule) -> Dict[Weekday, str]:
    """Validate every day; only failing days appear in the result."""
    errors = {}
    for day in Weekday:
        error = validate_day(schedule.day(day))
        if error is not None:
            errors[day] = error
    return errors
