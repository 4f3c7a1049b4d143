"""Seed local storage with the demo volunteers (no-op when a roster already exists)."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.kitchen_attendance.kitchen_attendance.common.datetime_utils import now_local
from src.kitchen_attendance.kitchen_attendance.storage.factory import build_storage
from src.kitchen_attendance.kitchen_attendance.volunteers.local_volunteer_repository import VolunteerStore


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    storage_config = dict(settings.STORAGE_CONFIG)
    if storage_config.get("backend") != "json":
        raise SystemExit("Seeding only makes sense for the json storage backend.")

    store = VolunteerStore(build_storage(storage_config), now=now_local())
    names = ", ".join(v.name for v in store.list_all()) or "-"
    print(f"OK: {len(store.list_all())} volunteers in {storage_config.get('path')} ({names})")


if __name__ == "__main__":
    main()
