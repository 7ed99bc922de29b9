# salonhub/repository.py
"""Database-backed schedule and appointment reads/writes."""

import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .data import shop_settings
from .errors import NotFound, PersistenceError, ScheduleValidationError
from .models import Appointment, StaffMember
from .schedule import WeeklySchedule
from .slots import SlotRequest, generate_slots
from .validator import validate_week

logger = logging.getLogger(__name__)


def get_staff(session: Session, staff_id: int) -> StaffMember:
    staff = session.get(StaffMember, staff_id)
    if staff is None:
        raise NotFound("Staff member not found")
    return staff


def fetch_schedule(session: Session, staff_id: int) -> WeeklySchedule:
    return WeeklySchedule.from_document(get_staff(session, staff_id).schedule)


def save_schedule(session: Session, staff_id: int, schedule: WeeklySchedule) -> WeeklySchedule:
    """Replace the stored schedule document after validating every day."""
    errors = validate_week(schedule)
    if errors:
        raise ScheduleValidationError(errors={day.value: message for day, message in errors.items()})

    staff = get_staff(session, staff_id)
    staff.schedule = schedule.to_document()
    session.add(staff)
    session.commit()
    session.refresh(staff)

    logger.info(f"Saved weekly schedule for staff {staff_id}")
    return WeeklySchedule.from_document(staff.schedule)


def fetch_appointments(
    session: Session,
    staff_id: int,
    on_date: date,
    status: Optional[str] = None,
) -> List[Appointment]:
    """Appointments of a staff member that touch ``on_date``, ordered by start."""
    day_start_dt = datetime.combine(on_date, datetime.min.time())
    day_end_dt = day_start_dt + timedelta(days=1)

    stmt = (
        select(Appointment)
        .where(Appointment.staff_id == staff_id)
        .where(Appointment.starts_at < day_end_dt)
        .where(Appointment.ends_at > day_start_dt)
    )
    if status is not None:
        stmt = stmt.where(Appointment.status == status)

    return list(session.exec(stmt.order_by(Appointment.starts_at)).all())


def list_available_slots(
    session: Session,
    staff_id: int,
    on_date: date,
    duration_minutes: int,
    granularity_minutes: Optional[int] = None,
) -> List[datetime]:
    schedule = fetch_schedule(session, staff_id)
    appointments = fetch_appointments(session, staff_id, on_date)
    request = SlotRequest(staff_id=staff_id, date=on_date, duration_minutes=duration_minutes)
    return generate_slots(
        schedule,
        appointments,
        request,
        granularity_minutes or shop_settings["slot_minutes"],
    )


class DatabaseScheduleStore:
    """ScheduleStore for editing a schedule in-process against the database."""

    def __init__(self, session: Session):
        self.session = session

    def fetch_schedule(self, staff_id: int) -> WeeklySchedule:
        return fetch_schedule(self.session, staff_id)

    def save_schedule(self, staff_id: int, schedule: WeeklySchedule) -> WeeklySchedule:
        try:
            return save_schedule(self.session, staff_id, schedule)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceError(f"Could not save schedule: {e}") from e
