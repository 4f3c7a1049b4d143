from __future__ import annotations

from enum import Enum


class EventType(str, Enum):
    """Kind of attendance event recorded at the kiosk."""

    CLOCK_IN = "CLOCK_IN"
    CLOCK_OUT = "CLOCK_OUT"


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored with each record.

    EARLY_LEAVE and OVERTIME are part of the stored format but no rule
    currently produces them.
    """

    ON_TIME = "ON_TIME"
    LATE = "LATE"
    EARLY_LEAVE = "EARLY"
    OVERTIME = "OVERTIME"


class VerdictKind(str, Enum):
    """Outcome of checking an arrival time against a role's shift window."""

    OK = "OK"
    LATE = "LATE"
    TOO_EARLY = "TOO_EARLY"


class WorkflowState(str, Enum):
    SELECTING_VOLUNTEER = "SELECTING_VOLUNTEER"
    CAPTURING_INPUT = "CAPTURING_INPUT"
    AWAITING_VERIFICATION = "AWAITING_VERIFICATION"
    RECORD_COMMITTED = "RECORD_COMMITTED"


class View(str, Enum):
    """Top-level screen the kiosk front-end should show."""

    DASHBOARD = "dashboard"
    ATTENDANCE = "attendance"
    HISTORY = "history"
    REPORTS = "reports"
