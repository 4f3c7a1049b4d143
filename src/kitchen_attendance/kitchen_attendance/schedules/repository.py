from __future__ import annotations

from typing import Iterable, Optional, Protocol

from .model import ShiftWindow


class ScheduleTable(Protocol):
    """Read-only role -> shift window lookup.

    A role missing from the table is a "general" role without arrival rules.
    """

    def lookup(self, role: str) -> Optional[ShiftWindow]:
        raise NotImplementedError

    def roles(self) -> list[str]:
        raise NotImplementedError

    def items(self) -> Iterable[tuple[str, ShiftWindow]]:
        raise NotImplementedError
