from datetime import datetime, time, timedelta
from types import SimpleNamespace

import pytest

from salonhub.schedule import DaySchedule, Shift, Weekday, WeeklySchedule
from salonhub.slots import SlotRequest, day_windows, generate_slots

from conftest import MONDAY, nine_to_five_mondays

STAFF_ID = 7


def at(hour, minute=0, on=MONDAY):
    return datetime.combine(on, time(hour, minute))


def appt(start, minutes, status="booked", staff_id=STAFF_ID):
    return SimpleNamespace(staff_id=staff_id, starts_at=start, ends_at=start + timedelta(minutes=minutes), status=status)


def request(duration=30, on=MONDAY):
    return SlotRequest(staff_id=STAFF_ID, date=on, duration_minutes=duration)


def monday_with(*windows):
    return WeeklySchedule.empty().with_day(
        Weekday.monday,
        DaySchedule(enabled=True, shifts=tuple(Shift(start=s, end=e) for s, e in windows)),
    )


def test_full_day_half_hour_grid():
    slots = generate_slots(nine_to_five_mondays(), [], request(30), granularity_minutes=30)
    assert len(slots) == 16
    assert slots[0] == at(9)
    assert slots[-1] == at(16, 30)
    assert slots == [at(9) + timedelta(minutes=30 * i) for i in range(16)]


def test_booked_appointment_blocks_only_its_interval():
    slots = generate_slots(nine_to_five_mondays(), [appt(at(10), 30)], request(30), granularity_minutes=30)
    assert at(10) not in slots
    assert at(9, 30) in slots
    assert at(10, 30) in slots
    assert len(slots) == 15


def test_longer_service_cannot_straddle_a_booking():
    slots = generate_slots(nine_to_five_mondays(), [appt(at(10), 30)], request(60), granularity_minutes=15)
    assert at(9) in slots
    assert at(9, 15) not in slots
    assert at(9, 45) not in slots
    assert at(10, 30) in slots
    assert slots[-1] == at(16)


@pytest.mark.parametrize("status", ["cancelled", "no-show"])
def test_cancelled_and_no_show_free_the_slot(status):
    slots = generate_slots(nine_to_five_mondays(), [appt(at(10), 30, status=status)], request(30), 30)
    assert at(10) in slots


def test_completed_appointment_still_occupies():
    slots = generate_slots(nine_to_five_mondays(), [appt(at(10), 30, status="completed")], request(30), 30)
    assert at(10) not in slots


def test_other_staff_bookings_are_ignored():
    slots = generate_slots(nine_to_five_mondays(), [appt(at(10), 30, staff_id=99)], request(30), 30)
    assert at(10) in slots


def test_disabled_day_has_no_slots():
    assert generate_slots(nine_to_five_mondays(), [], request(30, on=MONDAY + timedelta(days=1)), 15) == []


def test_enabled_day_without_shifts_has_no_slots():
    schedule = WeeklySchedule.empty().with_day(Weekday.monday, DaySchedule(enabled=True))
    assert generate_slots(schedule, [], request(30), 15) == []


def test_shift_shorter_than_service_yields_nothing():
    schedule = monday_with((time(9), time(9, 45)), (time(13), time(14)))
    slots = generate_slots(schedule, [], request(60), 15)
    assert slots == [at(13)]


def test_split_shifts_are_merged_in_order():
    schedule = monday_with((time(14), time(15)), (time(9), time(10)))
    slots = generate_slots(schedule, [], request(30), 30)
    assert slots == [at(9), at(9, 30), at(14), at(14, 30)]


def test_overlapping_shifts_do_not_duplicate_slots():
    schedule = monday_with((time(9), time(11)), (time(10), time(12)))
    slots = generate_slots(schedule, [], request(60), 60)
    assert slots == [at(9), at(10), at(11)]


def test_candidates_anchor_on_shift_start():
    schedule = monday_with((time(9, 10), time(10, 10)))
    assert generate_slots(schedule, [], request(30), 30) == [at(9, 10), at(9, 40)]


def test_generate_is_repeatable():
    appointments = [appt(at(11), 45), appt(at(15), 15)]
    first = generate_slots(nine_to_five_mondays(), appointments, request(30), 15)
    second = generate_slots(nine_to_five_mondays(), appointments, request(30), 15)
    assert first == second


def test_accepts_generators_of_appointments():
    slots = generate_slots(nine_to_five_mondays(), (a for a in [appt(at(9), 30)]), request(30), 30)
    assert slots[0] == at(9, 30)


def test_past_dates_are_not_rejected():
    past_monday = MONDAY - timedelta(weeks=52 * 10)
    slots = generate_slots(nine_to_five_mondays(), [], request(30, on=past_monday), 30)
    assert len(slots) == 16


@pytest.mark.parametrize("granularity", [0, -15])
def test_granularity_must_be_positive(granularity):
    with pytest.raises(ValueError):
        generate_slots(nine_to_five_mondays(), [], request(30), granularity)


def test_day_windows_anchor_shifts_on_the_date():
    assert day_windows(nine_to_five_mondays(), MONDAY) == [(at(9), at(17))]
