# salonhub/schedule.py
"""
Weekly recurring working hours for a staff member.

A schedule holds one DaySchedule per weekday; each enabled day lists the
shifts (time-of-day windows) the staff member works. Values are immutable:
every edit builds a new WeeklySchedule and shares the untouched days.

Documents are stored keyed by weekday name:

    {"Monday": {"enabled": true, "shifts": [{"start": "09:00", "end": "17:00"}]}, ...}
"""

from datetime import date, time
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator, model_validator


class Weekday(str, Enum):
    monday = "Monday"
    tuesday = "Tuesday"
    wednesday = "Wednesday"
    thursday = "Thursday"
    friday = "Friday"
    saturday = "Saturday"
    sunday = "Sunday"

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        return _WEEK[value.weekday()]  # 0=Mon, 1=Tues....

    @property
    def next(self) -> "Weekday":
        return _WEEK[(_WEEK.index(self) + 1) % 7]


_WEEK = tuple(Weekday)


class Shift(BaseModel):
    # start < end is left to validator.validate_day
    model_config = ConfigDict(frozen=True)

    start: time
    end: time

    @field_validator("start", "end")
    @classmethod
    def _minute_resolution(cls, value: time) -> time:
        return value.replace(second=0, microsecond=0, tzinfo=None)

    @field_serializer("start", "end")
    def _hhmm(self, value: time) -> str:
        return value.strftime("%H:%M")


class DaySchedule(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    shifts: Tuple[Shift, ...] = ()

    def replace_shifts(self, shifts) -> "DaySchedule":
        return DaySchedule(enabled=self.enabled, shifts=tuple(shifts))


CLOSED_DAY = DaySchedule()


class WeeklySchedule(BaseModel):
    model_config = ConfigDict(frozen=True)

    days: Dict[Weekday, DaySchedule]

    @model_validator(mode="before")
    @classmethod
    def _fill_missing_days(cls, data: Any) -> Any:
        if isinstance(data, dict) and "days" in data:
            days = dict(data["days"] or {})
            for day in Weekday:
                days.setdefault(day, CLOSED_DAY)
            data = {**data, "days": days}
        return data

    @classmethod
    def empty(cls) -> "WeeklySchedule":
        return cls(days={day: CLOSED_DAY for day in Weekday})

    def day(self, weekday: Weekday) -> DaySchedule:
        return self.days[Weekday(weekday)]

    def for_date(self, on_date: date) -> DaySchedule:
        return self.days[Weekday.from_date(on_date)]

    def with_day(self, weekday: Weekday, day_schedule: DaySchedule) -> "WeeklySchedule":
        days = dict(self.days)
        days[Weekday(weekday)] = day_schedule
        return WeeklySchedule(days=days)

    def to_document(self) -> Dict[str, Dict[str, Any]]:
        document = {}
        for day in Weekday:
            day_schedule = self.days[day]
            shifts = day_schedule.shifts if day_schedule.enabled else ()
            document[day.value] = {
                "enabled": day_schedule.enabled,
                "shifts": [shift.model_dump() for shift in shifts],
            }
        return document

    @classmethod
    def from_document(cls, raw: Optional[Mapping[str, Any]]) -> "WeeklySchedule":
        """Build a schedule from a stored or submitted document.

        Unknown shapes become a closed day. Shift times that are present but
        unparseable raise pydantic.ValidationError.
        """
        if not isinstance(raw, Mapping):
            return cls.empty()

        days = {}
        for day in Weekday:
            day_data = raw.get(day.value)
            if not isinstance(day_data, Mapping):
                days[day] = CLOSED_DAY
                continue

            shifts = []
            raw_shifts = day_data.get("shifts")
            if isinstance(raw_shifts, (list, tuple)):
                for raw_shift in raw_shifts:
                    if not isinstance(raw_shift, Mapping):
                        continue
                    start = raw_shift.get("start") or raw_shift.get("begin") or raw_shift.get("from")
                    end = raw_shift.get("end") or raw_shift.get("finish") or raw_shift.get("to")
                    if not start or not end:
                        continue
                    shifts.append(Shift(start=start, end=end))

            enabled = day_data.get("enabled")
            if not isinstance(enabled, bool):
                enabled = len(shifts) > 0
            days[day] = DaySchedule(enabled=enabled, shifts=tuple(shifts) if enabled else ())

        return cls(days=days)
