from __future__ import annotations

from ..core.constants import GENERAL_ROLE
from .repository import ScheduleTable


class ScheduleService:
    """Read-side helpers for showing the schedule table to volunteers."""

    def __init__(self, table: ScheduleTable):
        self._table = table

    def is_known_role(self, role: str | None) -> bool:
        return bool(role) and self._table.lookup(role) is not None

    def normalize_role(self, role: str | None) -> str:
        role = (role or "").strip()
        return role if self.is_known_role(role) else GENERAL_ROLE

    def shift_info(self, role: str) -> str:
        window = self._table.lookup(role)
        return window.label if window else "Jadwal Umum"

    def list_rows(self) -> list[dict]:
        return [
            {
                "role": role,
                "start": f"{window.start:%H:%M}",
                "end": f"{window.end:%H:%M}",
                "crosses_midnight": window.crosses_midnight,
                "description": window.description,
                "tasks": list(window.tasks),
            }
            for role, window in self._table.items()
        ]
