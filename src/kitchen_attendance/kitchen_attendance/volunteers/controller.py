from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_errors
from ..container import Container
from .model import Volunteer


def volunteer_to_json(v: Volunteer) -> dict:
    return {
        "id": v.id,
        "name": v.name,
        "phone": v.phone,
        "default_role": v.default_role,
        "join_date": v.join_date.strftime("%Y-%m-%d"),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/volunteers", methods=["GET"], endpoint="list_volunteers")
    @json_errors
    def list_volunteers():
        found = container.volunteer_service.search(request.args.get("q", ""))
        return jsonify({"success": True, "volunteers": [volunteer_to_json(v) for v in found]})

    @app.route("/api/volunteers", methods=["POST"], endpoint="add_volunteer")
    @json_errors
    def add_volunteer():
        data = request.get_json(silent=True) or {}

        async def _register():
            return container.volunteer_service.register(
                name=data.get("name", ""),
                phone=data.get("phone", ""),
                role=data.get("role"),
            )

        volunteer = container.runner.run(_register())
        return jsonify({"success": True, "volunteer": volunteer_to_json(volunteer)}), 201
