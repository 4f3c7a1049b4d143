from __future__ import annotations

import atexit
import importlib
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .storage.base import KeyValueStorage
from .volunteers.controller import register as register_volunteers

logger = logging.getLogger("kitchen_attendance")


def create_app(*, storage: KeyValueStorage | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=[logging.StreamHandler()],
    )

    storage_config = dict(getattr(settings, "STORAGE_CONFIG"))
    ai_config = dict(getattr(settings, "AI_CONFIG"))
    attendance_config = dict(getattr(settings, "ATTENDANCE_CONFIG"))
    logger.info(
        "settings=%s storage=%s ai=%s",
        settings_module,
        storage_config.get("path") if storage_config.get("backend") == "json" else storage_config.get("backend"),
        "gemini" if ai_config.get("api_key") else "offline",
    )

    container = build_container(
        storage_config=storage_config,
        ai_config=ai_config,
        attendance_config=attendance_config,
        storage=storage,
    )
    app.extensions["kitchen_attendance"] = container
    atexit.register(container.shutdown)

    @app.get("/healthz")
    def healthcheck():
        return jsonify({"status": "ok"})

    register_volunteers(app, container)
    register_attendance(app, container)
    register_schedules(app, container)
    register_reports(app, container)

    return app


def get_container(app: Flask) -> Container:
    return app.extensions["kitchen_attendance"]


if __name__ == "__main__":  # pragma: no cover
    import os

    create_app().run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
