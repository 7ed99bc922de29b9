# salonhub/routers/staff_routes.py

import logging
from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError
from sqlmodel import Session, select

from salonhub.db import get_session
from salonhub.models import StaffMember, AppointmentStatus
from salonhub.schemas import (
    StaffCreate,
    StaffPublic,
    ScheduleDocument,
    StaffSchedule,
    AvailabilityResponse,
    DailySchedule,
    WeeklyView,
    AppointmentPublic,
)
from salonhub.auth import get_current_user
from salonhub.deps import require_role, http_error
from salonhub.errors import SchedulingError
from salonhub.repository import (
    get_staff,
    fetch_schedule,
    save_schedule,
    fetch_appointments,
    list_available_slots,
)
from salonhub.schedule import Weekday, WeeklySchedule
from salonhub.slots import day_windows

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/staff",
    tags=["staff"],
)

@router.post("", response_model=StaffPublic, status_code=201)
def create_staff(
    staff: StaffCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "vendor")  # only vendors manage staff

    # New staff start with every day disabled
    db_staff = StaffMember(
        title=staff.title,
        user_email=staff.user_email,
        schedule=WeeklySchedule.empty().to_document(),
    )
    session.add(db_staff)
    session.commit()
    session.refresh(db_staff)

    logger.info(f"Created staff member {db_staff.id} ({db_staff.title})")
    return db_staff

@router.get("", response_model=List[StaffPublic])
def list_staff(session: Session = Depends(get_session)):
    return session.exec(select(StaffMember).order_by(StaffMember.id)).all()

@router.get("/{staff_id}", response_model=StaffPublic)
def read_staff(staff_id: int, session: Session = Depends(get_session)):
    try:
        return get_staff(session, staff_id)
    except SchedulingError as e:
        raise http_error(e)

@router.get("/{staff_id}/schedule", response_model=StaffSchedule)
def read_schedule(staff_id: int, session: Session = Depends(get_session)):
    try:
        schedule = fetch_schedule(session, staff_id)
    except SchedulingError as e:
        raise http_error(e)
    return {"staff_id": staff_id, "schedule": schedule.to_document()}

@router.put("/{staff_id}/schedule", response_model=StaffSchedule)
def replace_schedule(
    staff_id: int,
    body: ScheduleDocument,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "vendor")

    try:
        schedule = WeeklySchedule.from_document(body.schedule)
    except ValidationError:
        raise HTTPException(status_code=422, detail="Shift times must be HH:MM")

    try:
        stored = save_schedule(session, staff_id, schedule)
    except SchedulingError as e:
        raise http_error(e)
    return {"staff_id": staff_id, "schedule": stored.to_document()}

def _day_view(session: Session, staff_id: int, schedule: WeeklySchedule, on_date: date) -> dict:
    return {
        "staff_id": staff_id,
        "date": on_date,
        "weekday": Weekday.from_date(on_date).value,
        "enabled": schedule.for_date(on_date).enabled,
        "shifts": [{"start": start, "end": end} for start, end in day_windows(schedule, on_date)],
        "appointments": fetch_appointments(session, staff_id, on_date),
    }

# Registered before /schedule/{on_date} so "week" is not parsed as a date
@router.get("/{staff_id}/schedule/week/{start_date}", response_model=WeeklyView)
def read_weekly_schedule(
    staff_id: int,
    start_date: date,
    session: Session = Depends(get_session),
):
    try:
        schedule = fetch_schedule(session, staff_id)
    except SchedulingError as e:
        raise http_error(e)

    days = [_day_view(session, staff_id, schedule, start_date + timedelta(days=i)) for i in range(7)]
    return {"staff_id": staff_id, "start_date": start_date, "days": days}

@router.get("/{staff_id}/schedule/{on_date}", response_model=DailySchedule)
def read_daily_schedule(
    staff_id: int,
    on_date: date,
    session: Session = Depends(get_session),
):
    try:
        schedule = fetch_schedule(session, staff_id)
    except SchedulingError as e:
        raise http_error(e)

    return _day_view(session, staff_id, schedule, on_date)

@router.get("/{staff_id}/availability", response_model=AvailabilityResponse)
def staff_availability(
    staff_id: int,
    date: date,
    duration_minutes: int = Query(gt=0),
    session: Session = Depends(get_session),
):
    try:
        slots = list_available_slots(session, staff_id, date, duration_minutes)
    except SchedulingError as e:
        raise http_error(e)

    return {
        "staff_id": staff_id,
        "date": date,
        "duration_minutes": duration_minutes,
        "available_slots": slots,
    }

@router.get("/{staff_id}/appointments", response_model=List[AppointmentPublic])
def list_staff_appointments(
    staff_id: int,
    on_date: date,
    status: Optional[str] = "booked",
    session: Session = Depends(get_session),
):
    valid = {s.value for s in AppointmentStatus} | {"all"}
    if status not in valid:
        raise HTTPException(status_code=422, detail=f"status must be one of {', '.join(sorted(valid))}")

    try:
        get_staff(session, staff_id)
    except SchedulingError as e:
        raise http_error(e)

    return fetch_appointments(session, staff_id, on_date, None if status == "all" else status)
