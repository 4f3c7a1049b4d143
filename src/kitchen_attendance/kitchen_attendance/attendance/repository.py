from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Append-only attendance collection, newest first.

    The workflow and services depend on this interface, not on the
    concrete local-storage implementation.
    """

    def load(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def records(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def append(self, record: AttendanceRecord) -> None:
        raise NotImplementedError

    def next_id(self, now: datetime) -> str:
        raise NotImplementedError

    def today(self, now: datetime) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
