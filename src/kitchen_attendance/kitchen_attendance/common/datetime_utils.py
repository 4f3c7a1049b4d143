from __future__ import annotations

from datetime import datetime, time

from ..core.constants import MINUTES_PER_DAY


def parse_hhmm(value: str) -> time:
    """Parse an HH:MM string (e.g. '07:30') into a time of day."""
    return datetime.strptime(value.strip(), "%H:%M").time()


def now_local() -> datetime:
    """Current local time, truncated to milliseconds.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return truncate_to_millis(datetime.now())


def truncate_to_millis(value: datetime) -> datetime:
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def minutes_of_day(value: datetime | time) -> int:
    """Minutes elapsed since local midnight (0..1439)."""
    return (value.hour * 60 + value.minute) % MINUTES_PER_DAY


def to_epoch_millis(value: datetime) -> int:
    return int(value.timestamp()) * 1000 + value.microsecond // 1000


def from_epoch_millis(value: int) -> datetime:
    millis = int(value)
    return datetime.fromtimestamp(millis // 1000).replace(microsecond=(millis % 1000) * 1000)
