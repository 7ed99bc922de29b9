from datetime import date, time

import pytest
from pydantic import ValidationError

from salonhub.schedule import CLOSED_DAY, DaySchedule, Shift, Weekday, WeeklySchedule

from conftest import MONDAY, nine_to_five_mondays


def test_weekday_from_date():
    assert Weekday.from_date(MONDAY) is Weekday.monday
    assert Weekday.from_date(date(2031, 1, 12)) is Weekday.sunday


def test_weekday_succession_wraps():
    assert Weekday.monday.next is Weekday.tuesday
    assert Weekday.sunday.next is Weekday.monday


def test_empty_schedule_has_every_day_closed():
    schedule = WeeklySchedule.empty()
    assert set(schedule.days) == set(Weekday)
    assert all(schedule.day(d) == CLOSED_DAY for d in Weekday)


def test_missing_days_are_filled_as_closed():
    schedule = WeeklySchedule(days={Weekday.friday: DaySchedule(enabled=True)})
    assert len(schedule.days) == 7
    assert schedule.day(Weekday.friday).enabled
    assert not schedule.day(Weekday.monday).enabled


def test_with_day_returns_new_schedule_and_shares_other_days():
    before = WeeklySchedule.empty()
    tuesday = DaySchedule(enabled=True, shifts=(Shift(start=time(10), end=time(14)),))
    after = before.with_day(Weekday.tuesday, tuesday)

    assert before.day(Weekday.tuesday) == CLOSED_DAY
    assert after.day(Weekday.tuesday) == tuesday
    assert after.day(Weekday.monday) is before.day(Weekday.monday)


def test_values_are_immutable():
    shift = Shift(start=time(9), end=time(17))
    with pytest.raises(ValidationError):
        shift.start = time(8)


def test_shift_times_are_minute_resolution():
    shift = Shift(start=time(9, 0, 30), end="17:00")
    assert shift.start == time(9, 0)
    assert shift.model_dump() == {"start": "09:00", "end": "17:00"}


def test_document_round_trip():
    schedule = nine_to_five_mondays().with_day(
        Weekday.saturday,
        DaySchedule(
            enabled=True,
            shifts=(Shift(start=time(12), end=time(15)), Shift(start=time(9), end=time(12))),
        ),
    )
    document = schedule.to_document()

    assert document["Monday"] == {"enabled": True, "shifts": [{"start": "09:00", "end": "17:00"}]}
    assert document["Sunday"] == {"enabled": False, "shifts": []}
    assert WeeklySchedule.from_document(document) == schedule


def test_disabled_day_serializes_without_shifts():
    schedule = WeeklySchedule.empty().with_day(
        Weekday.monday, DaySchedule(enabled=False, shifts=(Shift(start=time(9), end=time(17)),))
    )
    assert schedule.to_document()["Monday"] == {"enabled": False, "shifts": []}


def test_from_document_is_lenient():
    raw = {
        "Monday": {"shifts": [{"begin": "08:00", "finish": "12:00"}, {"from": "13:00", "to": "18:00"}]},
        "Tuesday": {"enabled": True, "shifts": [{"start": "09:00"}]},
        "Wednesday": "not a day",
        "Thursday": {"enabled": False, "shifts": [{"start": "09:00", "end": "17:00"}]},
    }
    schedule = WeeklySchedule.from_document(raw)

    monday = schedule.day(Weekday.monday)
    assert monday.enabled
    assert monday.shifts == (
        Shift(start=time(8), end=time(12)),
        Shift(start=time(13), end=time(18)),
    )
    # enabled but the only shift lacks an end
    assert schedule.day(Weekday.tuesday) == DaySchedule(enabled=True, shifts=())
    assert schedule.day(Weekday.wednesday) == CLOSED_DAY
    assert schedule.day(Weekday.thursday) == CLOSED_DAY
    assert schedule.day(Weekday.sunday) == CLOSED_DAY


@pytest.mark.parametrize("raw", [None, [], "Monday", 42])
def test_from_document_rejects_non_mappings_as_empty(raw):
    assert WeeklySchedule.from_document(raw) == WeeklySchedule.empty()
