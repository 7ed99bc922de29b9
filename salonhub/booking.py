# salonhub/booking.py
"""
Booking commit and appointment status changes.

Slot listing and booking are separate requests, so two customers can pick the
same slot. The check for an overlapping appointment and the insert therefore
run in one transaction that first bumps the staff member's ``booking_seq``.
That UPDATE takes the row lock (PostgreSQL) or the database write lock
(SQLite), so a second booking for the same staff member waits until the first
commits and then sees its appointment. The partial unique index on
(staff_id, starts_at) catches anything that still slips through.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session

from .data import shop_settings
from .errors import BookingConflict, InvalidTransition, NotFound, PersistenceError, SchedulingError, ScheduleValidationError
from .models import Appointment, AppointmentStatus, OCCUPYING_STATUSES, StaffMember
from .repository import fetch_appointments
from .schedule import WeeklySchedule
from .slots import day_windows
from .validator import overlaps

logger = logging.getLogger(__name__)

# booked is the only status that can change; the rest are final
ALLOWED_TRANSITIONS = {
    AppointmentStatus.booked.value: {
        AppointmentStatus.completed.value,
        AppointmentStatus.cancelled.value,
        AppointmentStatus.no_show.value,
    },
}


class ConflictGuard:
    def __init__(self, session: Session, granularity_minutes: Optional[int] = None):
        self.session = session
        self.granularity_minutes = granularity_minutes or shop_settings["slot_minutes"]

    def _lock_staff(self, staff_id: int) -> StaffMember:
        result = self.session.connection().execute(
            update(StaffMember)
            .where(StaffMember.id == staff_id)
            .values(booking_seq=StaffMember.booking_seq + 1)
        )
        if result.rowcount == 0:
            raise NotFound("Staff member not found")
        return self.session.get(StaffMember, staff_id, populate_existing=True)

    def _check_working_hours(self, staff: StaffMember, appt_start: datetime, appt_end: datetime):
        schedule = WeeklySchedule.from_document(staff.schedule)
        step = timedelta(minutes=self.granularity_minutes)

        for shift_start, shift_end in day_windows(schedule, appt_start.date()):
            if shift_start <= appt_start and appt_end <= shift_end:
                if (appt_start - shift_start) % step != timedelta(0):
                    raise ScheduleValidationError(
                        f"Start time must be in {self.granularity_minutes}-minute increments"
                    )
                return

        raise ScheduleValidationError("Appointment must be within working hours")

    def _check_overlaps(self, staff_id: int, appt_start: datetime, appt_end: datetime, exclude_id: Optional[int] = None):
        for a in fetch_appointments(self.session, staff_id, appt_start.date()):
            if a.status not in OCCUPYING_STATUSES or a.id == exclude_id:
                continue
            if overlaps(appt_start, appt_end, a.starts_at, a.ends_at):
                raise BookingConflict("Appointment overlaps an existing appointment")

    def _interval(self, starts_at: datetime, duration_minutes: int, now: Optional[datetime]):
        if duration_minutes <= 0:
            raise ScheduleValidationError("duration_minutes must be positive")

        if starts_at.tzinfo is not None:
            raise ScheduleValidationError("starts_at must be a local time without timezone")

        # Naive local time, like every other timestamp here
        if starts_at < (now or datetime.now()):
            raise ScheduleValidationError("Cannot book an appointment in the past")

        return starts_at, starts_at + timedelta(minutes=duration_minutes)

    @contextmanager
    def _booking_transaction(self, staff_id: int, appt_start: datetime):
        try:
            yield
        except SchedulingError as e:
            self.session.rollback()
            if isinstance(e, BookingConflict):
                logger.warning(f"Booking conflict for staff {staff_id} at {appt_start.isoformat()}")
            raise
        except IntegrityError:
            self.session.rollback()
            logger.warning(f"Booking conflict for staff {staff_id} at {appt_start.isoformat()} (unique index)")
            raise BookingConflict("Appointment already exists for that start time")
        except OperationalError as e:
            self.session.rollback()
            raise PersistenceError(f"Could not save appointment: {e}") from e

    def create_appointment(
        self,
        staff_id: int,
        starts_at: datetime,
        duration_minutes: int,
        client_email: str,
        service: str,
        notes: str = "",
        now: Optional[datetime] = None,
    ) -> Appointment:
        """
        Atomically check the slot and insert the appointment.

        Raises:
            ScheduleValidationError: bad duration, start in the past, or outside working hours.
            NotFound: unknown staff member.
            BookingConflict: an occupying appointment already overlaps the interval.
            PersistenceError: the database could not complete the transaction.
        """
        appt_start, appt_end = self._interval(starts_at, duration_minutes, now)

        with self._booking_transaction(staff_id, appt_start):
            staff = self._lock_staff(staff_id)
            self._check_working_hours(staff, appt_start, appt_end)
            self._check_overlaps(staff_id, appt_start, appt_end)

            db_appt = Appointment(
                staff_id=staff_id,
                starts_at=appt_start,
                ends_at=appt_end,
                client_email=client_email,
                service=service,
                status=AppointmentStatus.booked.value,
                notes=notes,
            )
            self.session.add(db_appt)
            self.session.commit()

        self.session.refresh(db_appt)  # fills db_appt.id
        logger.info(f"Booked appointment {db_appt.id} for staff {staff_id} at {appt_start.isoformat()}")
        return db_appt

    def reschedule(
        self,
        appt_id: int,
        starts_at: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Appointment:
        """
        Move a booked appointment (and/or change its notes).

        A new start or duration goes through the same checks as a new booking,
        under the same staff lock; the appointment's own interval does not
        count as a conflict. Changing only the notes touches nothing else.

        Raises:
            NotFound: unknown appointment.
            InvalidTransition: the appointment is no longer booked.
            ScheduleValidationError, BookingConflict, PersistenceError: as create_appointment.
        """
        appt = get_appointment(self.session, appt_id)
        _require_booked(appt)

        if starts_at is None and duration_minutes is None:
            if notes is not None:
                appt.notes = notes
                self.session.add(appt)
                self.session.commit()
                self.session.refresh(appt)
            return appt

        if duration_minutes is None:
            duration_minutes = int((appt.ends_at - appt.starts_at).total_seconds() // 60)
        appt_start, appt_end = self._interval(starts_at or appt.starts_at, duration_minutes, now)
        staff_id = appt.staff_id

        with self._booking_transaction(staff_id, appt_start):
            staff = self._lock_staff(staff_id)
            # re-read under the lock; a concurrent cancel may have landed
            appt = self.session.get(Appointment, appt_id, populate_existing=True)
            _require_booked(appt)
            self._check_working_hours(staff, appt_start, appt_end)
            self._check_overlaps(staff_id, appt_start, appt_end, exclude_id=appt.id)

            appt.starts_at = appt_start
            appt.ends_at = appt_end
            if notes is not None:
                appt.notes = notes
            self.session.add(appt)
            self.session.commit()

        self.session.refresh(appt)
        logger.info(f"Moved appointment {appt.id} for staff {staff_id} to {appt_start.isoformat()}")
        return appt


def _require_booked(appt: Appointment):
    if appt.status != AppointmentStatus.booked.value:
        raise InvalidTransition(f"Appointment is already {appt.status}")


def get_appointment(session: Session, appt_id: int) -> Appointment:
    appt = session.get(Appointment, appt_id)
    if appt is None:
        raise NotFound("Appointment not found")
    return appt


def set_status(session: Session, appt: Appointment, status: str) -> Appointment:
    status = AppointmentStatus(status).value
    if status not in ALLOWED_TRANSITIONS.get(appt.status, set()):
        raise InvalidTransition(f"Appointment is already {appt.status}")

    appt.status = status
    session.add(appt)
    session.commit()
    session.refresh(appt)

    logger.info(f"Appointment {appt.id} is now {status}")
    return appt


def cancel_appointment(session: Session, appt: Appointment) -> Appointment:
    return set_status(session, appt, AppointmentStatus.cancelled.value)
