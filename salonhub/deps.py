# salonhub/deps.py

from fastapi import HTTPException

from .errors import BookingConflict, InvalidTransition, NotFound, PersistenceError, ScheduleValidationError, SchedulingError

def require_role(user: dict, role: str):
    if user["role"] != role:
        raise HTTPException(status_code=403, detail="Forbidden")

def http_error(e: SchedulingError) -> HTTPException:
    """Translate a scheduling error into the HTTP response the routes return."""
    if isinstance(e, NotFound):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, InvalidTransition):
        return HTTPException(status_code=409, detail=str(e), headers={"X-Conflict": "status"})
    if isinstance(e, BookingConflict):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, ScheduleValidationError):
        if e.errors:
            return HTTPException(status_code=422, detail={"message": e.message, "errors": e.errors})
        return HTTPException(status_code=422, detail=e.message)
    if isinstance(e, PersistenceError):
        return HTTPException(status_code=503, detail="Storage unavailable, please try again")
    return HTTPException(status_code=500, detail="Scheduling failure")
