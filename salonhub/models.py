# salonhub/models.py

from typing import Optional, Dict, Any
from datetime import datetime
from enum import Enum

from sqlalchemy import Index, text
from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column


class AppointmentStatus(str, Enum):
    booked = "booked"
    completed = "completed"
    cancelled = "cancelled"
    no_show = "no-show"


# Statuses that hold a slot on the calendar; cancelled / no-show free it immediately
OCCUPYING_STATUSES = (AppointmentStatus.booked.value, AppointmentStatus.completed.value)

_OCCUPYING_SQL = text("status IN ('booked', 'completed')")


class Appointment(SQLModel, table=True):
    __table_args__ = (
        Index(
            "uq_staff_start_active",
            "staff_id",
            "starts_at",
            unique=True,
            sqlite_where=_OCCUPYING_SQL,
            postgresql_where=_OCCUPYING_SQL,
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    staff_id: int = Field(foreign_key="staffmember.id", index=True)
    starts_at: datetime
    ends_at: datetime
    client_email: str
    service: str
    status: str = AppointmentStatus.booked.value
    notes: str = ""


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(index=True, unique=True)
    password_hash: str
    role: str # vendor or client


class StaffMember(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    user_email: Optional[str] = Field(default=None, index=True)

    # Whole WeeklySchedule document, replaced on every save
    schedule: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON))

    # Bumped inside every booking transaction to serialize bookings per staff member
    booking_seq: int = 0
