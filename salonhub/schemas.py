# salonhub/schemas.py

from pydantic import BaseModel, Field
from enum import Enum
from datetime import datetime, date
from typing import Dict, List, Any, Optional


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

class UserRole(str, Enum):
    vendor = "vendor"
    client = "client"

class UserPublic(BaseModel):
    id: int
    email: str
    role: UserRole

class UserCreate(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=72)
    role: UserRole

class StaffCreate(BaseModel):
    title: str = Field(min_length=1)
    user_email: Optional[str] = None

class StaffPublic(BaseModel):
    id: int
    title: str
    user_email: Optional[str] = None

class ScheduleDocument(BaseModel):
    # Keyed by weekday name: {"Monday": {"enabled": true, "shifts": [{"start": "09:00", "end": "17:00"}]}}
    schedule: Dict[str, Any]

class StaffSchedule(BaseModel):
    staff_id: int
    schedule: Dict[str, Any]

class AppointmentCreate(BaseModel):
    staff_id: int
    starts_at: datetime
    duration_minutes: int = Field(gt=0)
    service: str
    notes: str = ""

class AppointmentUpdate(BaseModel):
    # omitted fields keep their current value
    starts_at: Optional[datetime] = None
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    notes: Optional[str] = None

class AppointmentPublic(BaseModel):
    id: int
    staff_id: int
    starts_at: datetime
    ends_at: datetime
    client_email: str
    service: str
    status: str
    notes: str = ""

class StatusUpdate(BaseModel):
    status: str

class AvailabilityResponse(BaseModel):
    staff_id: int
    date: date
    duration_minutes: int
    available_slots: List[datetime]

class ShiftWindow(BaseModel):
    start: datetime
    end: datetime

class DailySchedule(BaseModel):
    staff_id: int
    date: date
    weekday: str
    enabled: bool
    shifts: List[ShiftWindow]
    appointments: List[AppointmentPublic]

class WeeklyView(BaseModel):
    staff_id: int
    start_date: date
    days: List[DailySchedule]
