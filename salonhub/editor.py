# salonhub/editor.py
"""
Schedule editing session.

An operator loads a staff member's weekly schedule, makes edits, and saves.
Every edit swaps in a new WeeklySchedule; the working copy is only handed to
the store after every day passes validation, and a failed save keeps the
edits so the operator can try again.

    viewing --edit--> editing --save--> validating --ok--> saving --> saved --> viewing
                         ^                  |                 |
                         +----day errors----+                 +--failure--> error --edit--> editing
"""

import logging
from datetime import time
from enum import Enum
from typing import Dict, Optional, Protocol

from .data import shop_settings
from .errors import NotFound, PersistenceError, SaveInProgress, ScheduleValidationError
from .schedule import DaySchedule, Shift, Weekday, WeeklySchedule
from .validator import validate_week

logger = logging.getLogger(__name__)


class ScheduleStore(Protocol):
    def fetch_schedule(self, staff_id: int) -> WeeklySchedule: ...

    def save_schedule(self, staff_id: int, schedule: WeeklySchedule) -> WeeklySchedule: ...


class EditorState(str, Enum):
    viewing = "viewing"
    editing = "editing"
    validating = "validating"
    saving = "saving"
    saved = "saved"
    error = "error"


def default_shift() -> Shift:
    return Shift(start=shop_settings["default_shift_start"], end=shop_settings["default_shift_end"])


class ScheduleEditor:
    def __init__(self, store: ScheduleStore, staff_id: int, baseline: Optional[WeeklySchedule] = None):
        self.store = store
        self.staff_id = staff_id
        self.baseline = baseline or WeeklySchedule.empty()
        self.schedule = self.baseline
        self.state = EditorState.viewing
        self.errors: Dict[Weekday, str] = {}
        self.last_error: Optional[str] = None

    @property
    def dirty(self) -> bool:
        return self.schedule != self.baseline

    def load(self) -> WeeklySchedule:
        """Fetch the stored schedule and make it the baseline. NotFound propagates."""
        self.baseline = self.store.fetch_schedule(self.staff_id)
        self.schedule = self.baseline
        self.errors = {}
        self.last_error = None
        self.state = EditorState.viewing
        return self.schedule

    def discard(self):
        self.schedule = self.baseline
        self.errors = {}
        self.last_error = None
        self.state = EditorState.viewing

    # --- edits -------------------------------------------------------------

    def _apply(self, weekday: Weekday, day_schedule: DaySchedule):
        if self.state in (EditorState.validating, EditorState.saving):
            raise SaveInProgress("Cannot edit while a save is in progress")
        weekday = Weekday(weekday)
        self.schedule = self.schedule.with_day(weekday, day_schedule)
        self.errors.pop(weekday, None)
        self.last_error = None
        self.state = EditorState.editing

    def toggle_day(self, weekday: Weekday):
        current = self.schedule.day(weekday)
        if current.enabled:
            # disabling drops the shifts; re-enabling starts over from the default
            self._apply(weekday, DaySchedule(enabled=False, shifts=()))
        else:
            self._apply(weekday, DaySchedule(enabled=True, shifts=(default_shift(),)))

    def add_shift(self, weekday: Weekday):
        current = self.schedule.day(weekday)
        self._apply(
            weekday,
            DaySchedule(enabled=True, shifts=current.shifts + (default_shift(),)),
        )

    def remove_shift(self, weekday: Weekday, index: int):
        current = self.schedule.day(weekday)
        if not 0 <= index < len(current.shifts):
            raise IndexError(f"{Weekday(weekday).value} has no shift {index}")
        self._apply(
            weekday,
            current.replace_shifts(s for i, s in enumerate(current.shifts) if i != index),
        )

    def update_shift(self, weekday: Weekday, index: int, start: Optional[time] = None, end: Optional[time] = None):
        current = self.schedule.day(weekday)
        if not 0 <= index < len(current.shifts):
            raise IndexError(f"{Weekday(weekday).value} has no shift {index}")
        old = current.shifts[index]
        new = Shift(
            start=start if start is not None else old.start,
            end=end if end is not None else old.end,
        )
        self._apply(
            weekday,
            current.replace_shifts(new if i == index else s for i, s in enumerate(current.shifts)),
        )

    # --- save --------------------------------------------------------------

    def save(self) -> bool:
        """
        Validate and persist the working copy.

        Returns True once the store accepted the schedule. Returns False when a
        day failed validation (see ``errors``) or the store failed for any
        reason other than NotFound (see ``last_error``); in both cases the
        edits are kept.
        """
        if self.state in (EditorState.validating, EditorState.saving):
            raise SaveInProgress("A save is already in progress")

        self.state = EditorState.validating
        errors = validate_week(self.schedule)
        if errors:
            self.errors = errors
            self.state = EditorState.editing
            return False

        self.errors = {}
        self.state = EditorState.saving
        try:
            stored = self.store.save_schedule(self.staff_id, self.schedule)
        except ScheduleValidationError as e:
            # rejected by the server even though it passed locally
            self.errors = {Weekday(day): message for day, message in e.errors.items()}
            self.last_error = e.message
            self.state = EditorState.editing
            return False
        except PersistenceError as e:
            logger.warning(f"Saving schedule for staff {self.staff_id} failed: {e}")
            self.last_error = str(e)
            self.state = EditorState.error
            return False
        except NotFound:
            self.state = EditorState.editing
            raise
        except Exception as e:
            # any other collaborator failure must not leave the editor locked in saving
            logger.exception(f"Saving schedule for staff {self.staff_id} failed")
            self.last_error = str(e) or type(e).__name__
            self.state = EditorState.error
            return False

        self.state = EditorState.saved
        self.baseline = stored if stored is not None else self.schedule
        self.schedule = self.baseline
        self.last_error = None
        self.state = EditorState.viewing
        logger.info(f"Schedule for staff {self.staff_id} saved")
        return True
