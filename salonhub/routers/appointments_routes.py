# salonhub/routers/appointments_routes.py

from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from salonhub.db import get_session
from salonhub.models import Appointment, StaffMember, AppointmentStatus
from salonhub.schemas import (
    AppointmentCreate,
    AppointmentUpdate,
    AppointmentPublic,
    StatusUpdate,
)
from salonhub.auth import get_current_user
from salonhub.deps import require_role, http_error
from salonhub.errors import SchedulingError
from salonhub.booking import ConflictGuard, get_appointment, set_status, cancel_appointment


router = APIRouter(
    tags=["appointments"],
)

@router.post("/appointments", response_model=AppointmentPublic, status_code=201)
def create_appointment(
    appt: AppointmentCreate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "client")  # only clients book

    guard = ConflictGuard(session)
    try:
        return guard.create_appointment(
            staff_id=appt.staff_id,
            starts_at=appt.starts_at,
            duration_minutes=appt.duration_minutes,
            client_email=current_user["email"],
            service=appt.service,
            notes=appt.notes,
        )
    except SchedulingError as e:
        raise http_error(e)

def _can_manage(session: Session, appt: Appointment, current_user: dict) -> bool:
    # client who booked OR a vendor OR the staff member's own account
    if current_user["email"] == appt.client_email:
        return True
    if current_user["role"] == "vendor":
        return True
    staff = session.get(StaffMember, appt.staff_id)
    return staff is not None and staff.user_email == current_user["email"]

@router.put("/appointments/{appt_id}", response_model=AppointmentPublic)
def update_appointment(
    appt_id: int,
    body: AppointmentUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    try:
        target = get_appointment(session, appt_id)
        if not _can_manage(session, target, current_user):
            raise HTTPException(status_code=403, detail="Forbidden")
        return ConflictGuard(session).reschedule(
            appt_id,
            starts_at=body.starts_at,
            duration_minutes=body.duration_minutes,
            notes=body.notes,
        )
    except SchedulingError as e:
        raise http_error(e)

@router.patch("/appointments/{appt_id}/cancel", response_model=AppointmentPublic)
def cancel(
    appt_id: int,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    try:
        target = get_appointment(session, appt_id)
        if not _can_manage(session, target, current_user):
            raise HTTPException(status_code=403, detail="Forbidden")
        return cancel_appointment(session, target)
    except SchedulingError as e:
        raise http_error(e)

@router.patch("/appointments/{appt_id}/status", response_model=AppointmentPublic)
def update_status(
    appt_id: int,
    body: StatusUpdate,
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "vendor")  # completed / no-show are recorded by the salon

    valid = {s.value for s in AppointmentStatus}
    if body.status not in valid:
        raise HTTPException(status_code=422, detail=f"status must be one of {', '.join(sorted(valid))}")

    try:
        target = get_appointment(session, appt_id)
        return set_status(session, target, body.status)
    except SchedulingError as e:
        raise http_error(e)

@router.get("/clients/me/appointments", response_model=List[AppointmentPublic])
def list_my_appointments(
    status: Optional[str] = "booked",
    session: Session = Depends(get_session),
    current_user: dict = Depends(get_current_user),
):
    require_role(current_user, "client")
    email = current_user["email"]

    valid = {s.value for s in AppointmentStatus} | {"all"}
    if status not in valid:
        raise HTTPException(status_code=422, detail=f"status must be one of {', '.join(sorted(valid))}")

    stmt = select(Appointment).where(Appointment.client_email == email)

    if status != "all":
        stmt = stmt.where(Appointment.status == status)

    stmt = stmt.order_by(Appointment.starts_at)

    appts = session.exec(stmt).all()
    return appts
