from __future__ import annotations

from datetime import datetime
from typing import Iterable

from .datetime_utils import to_epoch_millis


def next_time_id(now: datetime, existing: Iterable[str]) -> str:
    """Epoch-millisecond id that is strictly greater than every numeric id in `existing`.

    Two events created within the same millisecond get consecutive ids, so ids
    stay unique and sort in creation order.
    """

    candidate = to_epoch_millis(now)
    newest = max((int(i) for i in existing if str(i).isdigit()), default=0)
    return str(max(candidate, newest + 1))
