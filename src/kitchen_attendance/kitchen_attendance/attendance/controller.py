from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify, request

from ..common.http import fail, json_errors
from ..common.validators import require_float, require_non_empty
from ..container import Container
from ..devices.imaging import decode_data_url
from ..volunteers.controller import volunteer_to_json
from .model import AttendanceRecord, LocationFix


def record_to_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.id,
        "volunteer_id": r.volunteer_id,
        "volunteer_name": r.volunteer_name,
        "type": r.event_type.value,
        "status": r.status.value,
        "timestamp": r.timestamp.isoformat(),
        "location": asdict(r.location),
        "note": r.verification_note,
        "verified": r.is_verified,
        "activity": r.activity,
    }


def register(app: Flask, container: Container) -> None:
    workflow = container.workflow
    runner = container.runner

    def kiosk_status() -> dict:
        volunteer = workflow.volunteer
        location = workflow.location
        if location:
            location_status = f"{location.latitude:.5f}, {location.longitude:.5f}"
        else:
            location_status = workflow.location_error or "Mencari lokasi..."
        last = workflow.last_outcome
        return {
            "phase": workflow.phase.value,
            "view": container.state.view.value,
            "show_rules": container.state.show_rules,
            "volunteer": volunteer_to_json(volunteer) if volunteer else None,
            "shift_info": container.schedule_service.shift_info(volunteer.default_role) if volunteer else None,
            "location": asdict(location) if location else None,
            "location_status": location_status,
            "camera_ready": workflow.camera_ready,
            "camera_error": workflow.camera_error,
            "last_record": record_to_json(last.record) if last else None,
        }

    async def _status() -> dict:
        return kiosk_status()

    @app.route("/api/kiosk", methods=["GET"], endpoint="kiosk_status")
    def kiosk():
        return jsonify({"success": True, **runner.run(_status())})

    @app.route("/api/kiosk/select", methods=["POST"], endpoint="kiosk_select")
    @json_errors
    def kiosk_select():
        data = request.get_json(silent=True) or {}
        volunteer_id = require_non_empty(str(data.get("volunteer_id") or ""), "Relawan")
        runner.run(workflow.select_volunteer(volunteer_id))
        return jsonify({"success": True, **runner.run(_status())})

    @app.route("/api/kiosk/location", methods=["POST"], endpoint="kiosk_location")
    @json_errors
    def kiosk_location():
        data = request.get_json(silent=True) or {}
        fix = LocationFix(
            latitude=require_float(data.get("latitude"), "Latitude"),
            longitude=require_float(data.get("longitude"), "Longitude"),
            accuracy=require_float(data.get("accuracy", 0), "Akurasi"),
        )
        runner.run(container.devices.submit_location(fix))
        return jsonify({"success": True})

    @app.route("/api/kiosk/location/error", methods=["POST"], endpoint="kiosk_location_error")
    @json_errors
    def kiosk_location_error():
        data = request.get_json(silent=True) or {}
        runner.run(container.devices.report_location_error(str(data.get("message") or "")))
        return jsonify({"success": True})

    @app.route("/api/kiosk/frame", methods=["POST"], endpoint="kiosk_frame")
    @json_errors
    def kiosk_frame():
        data = request.get_json(silent=True) or {}
        runner.run(container.devices.submit_frame(decode_data_url(data.get("photo", ""))))
        return jsonify({"success": True})

    def _attendance_action(action):
        data = request.get_json(silent=True) or {}
        if data.get("photo"):
            runner.run(container.devices.submit_frame(decode_data_url(data["photo"])))
        record = runner.run(action())
        return jsonify({"success": True, "record": record_to_json(record), **runner.run(_status())}), 201

    @app.route("/api/kiosk/clock-in", methods=["POST"], endpoint="kiosk_clock_in")
    @json_errors
    def kiosk_clock_in():
        return _attendance_action(workflow.clock_in)

    @app.route("/api/kiosk/clock-out", methods=["POST"], endpoint="kiosk_clock_out")
    @json_errors
    def kiosk_clock_out():
        return _attendance_action(workflow.clock_out)

    @app.route("/api/kiosk/retry", methods=["POST"], endpoint="kiosk_retry")
    @json_errors
    def kiosk_retry():
        async def _retry():
            workflow.retry_capture()
            return kiosk_status()

        return jsonify({"success": True, **runner.run(_retry())})

    @app.route("/api/kiosk/reset", methods=["POST"], endpoint="kiosk_reset")
    @json_errors
    def kiosk_reset():
        async def _reset():
            workflow.change_volunteer()
            return kiosk_status()

        return jsonify({"success": True, **runner.run(_reset())})

    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @json_errors
    def dashboard():
        async def _dashboard():
            return (
                container.attendance_service.dashboard_stats(),
                [volunteer_to_json(v) for v in container.volunteer_service.list_all()],
            )

        stats, volunteers = runner.run(_dashboard())
        return jsonify({"success": True, "stats": asdict(stats), "volunteers": volunteers})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @json_errors
    def attendance_history():
        limit = request.args.get("limit", type=int)
        if limit is not None and limit <= 0:
            return fail("limit harus lebih dari 0", 400)

        async def _rows():
            return container.attendance_service.history_rows(limit=limit)

        return jsonify({"success": True, "rows": runner.run(_rows())})

    @app.route("/api/attendance/history.csv", methods=["GET"], endpoint="attendance_history_csv")
    @json_errors
    def attendance_history_csv():
        async def _csv():
            return container.attendance_service.history_csv()

        return app.response_class(
            runner.run(_csv()),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=attendance_history.csv"},
        )
