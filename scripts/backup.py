"""Backup the kiosk storage file.

Copies the JSON storage document into `backups/` with a timestamped name.
"""

from __future__ import annotations

import importlib
import shutil
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    storage_config = settings.STORAGE_CONFIG
    if storage_config.get("backend") != "json":
        raise SystemExit("Only the json storage backend can be backed up.")

    source = Path(storage_config["path"]).expanduser()
    if not source.exists():
        raise SystemExit(f"Storage file not found: {source}")

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"kiosk_storage_{ts}.json"
    shutil.copy2(source, out_file)
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
