from __future__ import annotations

from typing import Optional


class InMemoryStorage:
    """Process-local storage used by tests and the testing settings module."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
