from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import from_epoch_millis, to_epoch_millis
from ..core.constants import VOLUNTEERS_KEY
from ..storage.base import KeyValueStorage
from .model import Volunteer
from .repository import VolunteerRepository

logger = logging.getLogger(__name__)


def default_volunteers(now: datetime) -> list[Volunteer]:
    return [
        Volunteer(id="1", name="Budi Santoso", phone="08123456789", default_role="Cook", join_date=now),
        Volunteer(id="2", name="Siti Aminah", phone="08129876543", default_role="Pemorsian", join_date=now),
    ]


class VolunteerStore(VolunteerRepository):
    """Volunteer roster in local storage; seeded with demo volunteers on first run."""

    def __init__(self, storage: KeyValueStorage, *, now: datetime, key: str = VOLUNTEERS_KEY):
        self._storage = storage
        self._key = key
        raw = storage.get(key)
        if raw is None:
            self._volunteers = default_volunteers(now)
            self._persist()
            logger.info("seeded %d default volunteers", len(self._volunteers))
        else:
            self._volunteers = _decode(raw, key)

    def list_all(self) -> Sequence[Volunteer]:
        return tuple(self._volunteers)

    def get_by_id(self, volunteer_id: str) -> Optional[Volunteer]:
        return next((v for v in self._volunteers if v.id == str(volunteer_id)), None)

    def add(self, volunteer: Volunteer) -> None:
        self._volunteers = [*self._volunteers, volunteer]
        self._persist()

    def _persist(self) -> None:
        self._storage.set(self._key, json.dumps([_to_payload(v) for v in self._volunteers], ensure_ascii=False))


def _decode(raw: str, key: str) -> list[Volunteer]:
    try:
        payload = json.loads(raw)
        if not isinstance(payload, list):
            raise ValueError("expected a list")
        return [
            Volunteer(
                id=str(item["id"]),
                name=str(item["name"]),
                phone=str(item.get("phone") or ""),
                default_role=str(item.get("defaultRole") or ""),
                join_date=from_epoch_millis(item["joinDate"]),
            )
            for item in payload
        ]
    except (ValueError, TypeError, KeyError, AttributeError, OverflowError, OSError) as exc:
        logger.warning("stored %r is corrupt (%s), treating it as empty", key, exc)
        return []


def _to_payload(v: Volunteer) -> dict[str, Any]:
    return {
        "id": v.id,
        "name": v.name,
        "phone": v.phone,
        "defaultRole": v.default_role,
        "joinDate": to_epoch_millis(v.join_date),
    }
