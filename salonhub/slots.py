# salonhub/slots.py
"""
Slot generation.

Turns a staff member's weekly schedule, the appointments already on the
calendar and a requested service duration into the start times a customer
can be offered on one date.

Rules:
- A disabled day, or an enabled day without shifts, has no slots.
- Candidates start at each shift's start and step by the booking granularity;
  a candidate is kept only if the whole service fits before the shift ends.
- A candidate is dropped when [start, start + duration) overlaps a booked or
  completed appointment of the same staff member (touching is allowed).
- Results are sorted and unique, even if two shifts overlap.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .models import OCCUPYING_STATUSES
from .schedule import Shift, WeeklySchedule
from .validator import overlaps


class SlotRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    staff_id: int
    date: date
    duration_minutes: int = Field(gt=0)


def anchor_shift(shift: Shift, on_date: date) -> Tuple[datetime, datetime]:
    return datetime.combine(on_date, shift.start), datetime.combine(on_date, shift.end)


def day_windows(schedule: WeeklySchedule, on_date: date) -> List[Tuple[datetime, datetime]]:
    """Concrete [start, end) working windows for a calendar date, in shift order."""
    day_schedule = schedule.for_date(on_date)
    if not day_schedule.enabled:
        return []
    return [anchor_shift(shift, on_date) for shift in day_schedule.shifts]


def _busy_intervals(appointments: Iterable, staff_id: int) -> List[Tuple[datetime, datetime]]:
    busy = []
    for a in appointments:
        if a.staff_id != staff_id:
            continue
        if a.status not in OCCUPYING_STATUSES:
            continue
        busy.append((a.starts_at, a.ends_at))
    return busy


def generate_slots(
    schedule: WeeklySchedule,
    appointments: Iterable,
    request: SlotRequest,
    granularity_minutes: int,
) -> List[datetime]:
    """
    Offerable appointment start times for ``request.date``.

    ``appointments`` is any iterable of objects exposing ``staff_id``,
    ``starts_at``, ``ends_at`` and ``status``. Shift consistency is not
    re-checked here; run the validator before persisting a schedule.
    """
    if granularity_minutes <= 0:
        raise ValueError("granularity_minutes must be positive")
    if request.duration_minutes <= 0:
        raise ValueError("duration_minutes must be positive")

    step = timedelta(minutes=granularity_minutes)
    duration = timedelta(minutes=request.duration_minutes)
    busy = _busy_intervals(appointments, request.staff_id)

    available = set()
    for shift_start, shift_end in day_windows(schedule, request.date):
        current = shift_start
        while current + duration <= shift_end:
            slot_end = current + duration
            booked = False
            for busy_start, busy_end in busy:
                if overlaps(current, slot_end, busy_start, busy_end):
                    booked = True
                    break
            if not booked:
                available.add(current)
            current += step

    return sorted(available)
