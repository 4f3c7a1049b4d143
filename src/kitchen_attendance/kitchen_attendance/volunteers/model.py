from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Volunteer:
    """Domain entity: a registered kitchen volunteer.

    Note: plain data object, no storage access here.
    """

    id: str
    name: str
    phone: str
    default_role: str
    join_date: datetime
