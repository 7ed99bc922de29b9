# salonhub/errors.py

from typing import Dict, Optional


class SchedulingError(Exception):
    """Base class for scheduling and booking failures."""


class ScheduleValidationError(SchedulingError):
    """A schedule or booking request failed validation.

    ``errors`` maps weekday names to the first problem found on that day when
    the failure comes from a weekly schedule; it is empty for single-message
    failures such as a booking outside working hours.
    """

    def __init__(self, message: str = "Schedule is invalid", errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = dict(errors or {})


class BookingConflict(SchedulingError):
    """The requested interval overlaps an appointment that already holds the slot."""


class NotFound(SchedulingError):
    pass


class PersistenceError(SchedulingError):
    """The persistence collaborator (database or remote API) failed."""


class SaveInProgress(SchedulingError):
    pass


class InvalidTransition(SchedulingError):
    """An appointment status change that is not allowed from its current status."""


class SlotsChanged(BookingConflict):
    """Raised to a booking caller after a conflict, with availability re-queried."""

    def __init__(self, message: str, slots):
        super().__init__(message)
        self.slots = list(slots)


class Unauthorized(SchedulingError):
    """The remote API refused the caller's credentials (401/403)."""
