from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_errors
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedules", methods=["GET"], endpoint="schedules")
    def schedules():
        return jsonify({"success": True, "schedules": container.schedule_service.list_rows()})

    @app.route("/api/rules", methods=["GET"], endpoint="rules")
    def rules():
        return jsonify(
            {
                "success": True,
                "accepted": not container.rules_service.needs_acknowledgement(),
                **container.rules_service.rules(),
            }
        )

    @app.route("/api/rules/accept", methods=["POST"], endpoint="accept_rules")
    @json_errors
    def accept_rules():
        async def _accept():
            container.rules_service.accept()
            container.state.show_rules = False

        container.runner.run(_accept())
        return jsonify({"success": True, "accepted": True})
