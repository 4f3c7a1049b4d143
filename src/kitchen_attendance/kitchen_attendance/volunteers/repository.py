from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Volunteer


class VolunteerRepository(Protocol):
    def list_all(self) -> Sequence[Volunteer]:
        raise NotImplementedError

    def get_by_id(self, volunteer_id: str) -> Optional[Volunteer]:
        raise NotImplementedError

    def add(self, volunteer: Volunteer) -> None:
        raise NotImplementedError
