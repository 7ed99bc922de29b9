# salonhub/client.py
"""
HTTP client for the scheduling API.

Used by front-of-house tools (schedule editing, booking kiosks). Implements the
ScheduleStore protocol, so a ScheduleEditor can save straight to a remote
server, and turns HTTP failures back into the scheduling error kinds.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import httpx

from .config import API_BASE_URL
from .errors import (
    BookingConflict,
    InvalidTransition,
    NotFound,
    PersistenceError,
    ScheduleValidationError,
    SlotsChanged,
    Unauthorized,
)
from .schedule import WeeklySchedule
from .schemas import AppointmentPublic

logger = logging.getLogger(__name__)


def _detail(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("detail")
    return None


class SalonClient:
    def __init__(self, http: Optional[httpx.Client] = None, base_url: str = API_BASE_URL, timeout: float = 10.0):
        self.http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.token: Optional[str] = None

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self.http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise PersistenceError(f"Request failed: {e}") from e

        if response.is_success:
            return response

        detail = _detail(response)
        message = detail if isinstance(detail, str) else "Request failed"

        if response.status_code == 404:
            raise NotFound(message)
        if response.status_code in (401, 403):
            raise Unauthorized(message)
        if response.status_code == 409:
            # status changes and slot clashes share 409; the header tells them apart
            if response.headers.get("X-Conflict") == "status":
                raise InvalidTransition(message)
            raise BookingConflict(message)
        if response.status_code == 422:
            if isinstance(detail, dict):
                raise ScheduleValidationError(detail.get("message", "Schedule is invalid"), detail.get("errors"))
            raise ScheduleValidationError(message)
        if response.status_code >= 500:
            raise PersistenceError(f"Server error {response.status_code}")

        response.raise_for_status()
        return response

    def login(self, email: str, password: str) -> str:
        response = self._request("POST", "/auth/login", data={"username": email, "password": password})
        self.token = response.json()["access_token"]
        return self.token

    def fetch_schedule(self, staff_id: int) -> WeeklySchedule:
        response = self._request("GET", f"/staff/{staff_id}/schedule")
        return WeeklySchedule.from_document(response.json()["schedule"])

    def save_schedule(self, staff_id: int, schedule: WeeklySchedule) -> WeeklySchedule:
        response = self._request("PUT", f"/staff/{staff_id}/schedule", json={"schedule": schedule.to_document()})
        return WeeklySchedule.from_document(response.json()["schedule"])

    def fetch_appointments(self, staff_id: int, on_date: date) -> List[AppointmentPublic]:
        response = self._request(
            "GET",
            f"/staff/{staff_id}/appointments",
            params={"on_date": on_date.isoformat(), "status": "all"},
        )
        return [AppointmentPublic.model_validate(a) for a in response.json()]

    def list_available_slots(self, staff_id: int, on_date: date, duration_minutes: int) -> List[datetime]:
        response = self._request(
            "GET",
            f"/staff/{staff_id}/availability",
            params={"date": on_date.isoformat(), "duration_minutes": duration_minutes},
        )
        return [datetime.fromisoformat(s) for s in response.json()["available_slots"]]

    def create_appointment(
        self,
        staff_id: int,
        starts_at: datetime,
        duration_minutes: int,
        service: str,
        notes: str = "",
    ) -> AppointmentPublic:
        payload = {
            "staff_id": staff_id,
            "starts_at": starts_at.isoformat(),
            "duration_minutes": duration_minutes,
            "service": service,
            "notes": notes,
        }
        response = self._request("POST", "/appointments", json=payload)
        return AppointmentPublic.model_validate(response.json())

    def book(
        self,
        staff_id: int,
        starts_at: datetime,
        duration_minutes: int,
        service: str,
        notes: str = "",
    ) -> AppointmentPublic:
        """
        Book a slot picked from a previous availability listing.

        If someone else took the slot in the meantime the old listing is stale:
        availability is queried again and returned on SlotsChanged so the
        customer can pick again. The same slot is never retried.
        """
        try:
            return self.create_appointment(staff_id, starts_at, duration_minutes, service, notes)
        except BookingConflict as e:
            logger.info(f"Slot {starts_at.isoformat()} for staff {staff_id} was taken, refreshing availability")
            slots = self.list_available_slots(staff_id, starts_at.date(), duration_minutes)
            raise SlotsChanged("Slots changed, please pick again", slots) from e

    def reschedule(
        self,
        appt_id: int,
        starts_at: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> AppointmentPublic:
        payload: Dict[str, Any] = {}
        if starts_at is not None:
            payload["starts_at"] = starts_at.isoformat()
        if duration_minutes is not None:
            payload["duration_minutes"] = duration_minutes
        if notes is not None:
            payload["notes"] = notes
        response = self._request("PUT", f"/appointments/{appt_id}", json=payload)
        return AppointmentPublic.model_validate(response.json())

    def cancel_appointment(self, appt_id: int) -> AppointmentPublic:
        response = self._request("PATCH", f"/appointments/{appt_id}/cancel")
        return AppointmentPublic.model_validate(response.json())

    def close(self):
        self.http.close()
