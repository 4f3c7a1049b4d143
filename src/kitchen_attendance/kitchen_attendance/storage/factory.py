from __future__ import annotations

from pathlib import Path

from ..core.exceptions import ValidationError
from .base import KeyValueStorage
from .json_file import JsonFileStorage
from .memory import InMemoryStorage


def build_storage(config: dict) -> KeyValueStorage:
    backend = str(config.get("backend", "json")).lower()
    if backend == "memory":
        return InMemoryStorage()
    if backend == "json":
        return JsonFileStorage(Path(config.get("path", "kiosk_storage.json")).expanduser())
    raise ValidationError(f"Unknown storage backend: {backend!r}")
