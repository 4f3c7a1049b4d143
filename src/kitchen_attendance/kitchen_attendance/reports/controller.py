from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_errors
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/analysis", methods=["GET"], endpoint="dashboard_analysis")
    @json_errors
    def dashboard_analysis():
        analysis = container.runner.run(container.report_service.dashboard_analysis())
        return jsonify({"success": True, "analysis": analysis.as_dict()})

    @app.route("/api/reports/daily", methods=["POST"], endpoint="daily_report")
    @json_errors
    def daily_report():
        report = container.runner.run(container.report_service.daily_report())
        return jsonify({"success": True, "report": report})
