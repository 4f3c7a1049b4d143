from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Sequence

from ..common.datetime_utils import from_epoch_millis, to_epoch_millis
from ..common.ids import next_time_id
from ..core.constants import RECORDS_KEY
from ..core.enums import AttendanceStatus, EventType
from ..storage.base import KeyValueStorage
from .model import AttendanceRecord, LocationFix
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceRecordStore(AttendanceRepository):
    """Attendance records kept in memory and written back to local storage on every append."""

    def __init__(self, storage: KeyValueStorage, *, key: str = RECORDS_KEY):
        self._storage = storage
        self._key = key
        self._records: list[AttendanceRecord] = []
        self.load()

    def load(self) -> Sequence[AttendanceRecord]:
        raw = self._storage.get(self._key)
        self._records = _decode_records(raw, self._key) if raw else []
        return tuple(self._records)

    def records(self) -> Sequence[AttendanceRecord]:
        return tuple(self._records)

    def append(self, record: AttendanceRecord) -> None:
        self._records.insert(0, record)
        self._storage.set(self._key, json.dumps([_to_payload(r) for r in self._records], ensure_ascii=False))
        logger.info(
            "recorded %s %s for %s (%s)",
            record.event_type.value,
            record.status.value,
            record.volunteer_name,
            record.id,
        )

    def next_id(self, now: datetime) -> str:
        return next_time_id(now, (r.id for r in self._records))

    def today(self, now: datetime) -> Sequence[AttendanceRecord]:
        day = now.date()
        return tuple(r for r in self._records if r.timestamp.date() == day)

    def active_volunteer_count(self, now: datetime) -> int:
        return len({r.volunteer_id for r in self.today(now) if r.event_type == EventType.CLOCK_IN})

    def late_count(self, now: datetime) -> int:
        return sum(1 for r in self.today(now) if r.status == AttendanceStatus.LATE)


def _decode_records(raw: str, key: str) -> list[AttendanceRecord]:
    try:
        payload = json.loads(raw)
        if not isinstance(payload, list):
            raise ValueError("expected a list")
        return [_from_payload(item) for item in payload]
    except (ValueError, TypeError, KeyError, AttributeError, OverflowError, OSError) as exc:
        logger.warning("stored %r is corrupt (%s), treating it as empty", key, exc)
        return []


def _to_payload(r: AttendanceRecord) -> dict[str, Any]:
    return {
        "id": r.id,
        "userId": r.volunteer_id,
        "userName": r.volunteer_name,
        "type": r.event_type.value,
        "status": r.status.value,
        "timestamp": to_epoch_millis(r.timestamp),
        "photoUrl": r.photo_reference,
        "location": {
            "latitude": r.location.latitude,
            "longitude": r.location.longitude,
            "accuracy": r.location.accuracy,
        },
        "aiVerificationNote": r.verification_note,
        "isVerified": r.is_verified,
        "activity": r.activity,
    }


def _from_payload(item: dict[str, Any]) -> AttendanceRecord:
    loc = item["location"]
    return AttendanceRecord(
        id=str(item["id"]),
        volunteer_id=str(item["userId"]),
        volunteer_name=str(item["userName"]),
        event_type=EventType(item["type"]),
        status=AttendanceStatus(item["status"]),
        timestamp=from_epoch_millis(item["timestamp"]),
        photo_reference=str(item.get("photoUrl") or ""),
        location=LocationFix(
            latitude=float(loc["latitude"]),
            longitude=float(loc["longitude"]),
            accuracy=float(loc["accuracy"]),
        ),
        verification_note=str(item.get("aiVerificationNote") or ""),
        is_verified=bool(item.get("isVerified", False)),
        activity=str(item.get("activity") or ""),
    )
