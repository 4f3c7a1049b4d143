from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AttendanceStatus, EventType, VerdictKind


@dataclass(frozen=True)
class LocationFix:
    latitude: float
    longitude: float
    accuracy: float


@dataclass(frozen=True)
class ShiftVerdict:
    """Result of checking a check-in time against the role's shift window (not persisted)."""

    kind: VerdictKind
    message: str


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one clock-in or clock-out event. Immutable once created."""

    id: str
    volunteer_id: str
    volunteer_name: str
    event_type: EventType
    status: AttendanceStatus
    timestamp: datetime
    photo_reference: str
    location: LocationFix
    verification_note: str
    is_verified: bool
    activity: str

    @property
    def is_clock_in(self) -> bool:
        return self.event_type == EventType.CLOCK_IN
