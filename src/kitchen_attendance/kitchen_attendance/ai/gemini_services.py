from __future__ import annotations

import json
from typing import Any, Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import GENERAL_ROLE, SITE_NAME
from ..core.exceptions import ExternalServiceError
from ..schedules.repository import ScheduleTable
from .gemini_client import GeminiClient, jpeg_part, text_part
from .ports import OperationalAnalysis, VerificationResult

PHOTO_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "hasFace": {"type": "BOOLEAN"},
        "hasHygieneGear": {"type": "BOOLEAN"},
        "environment": {"type": "STRING"},
        "gearDescription": {"type": "STRING"},
    },
    "required": ["hasFace", "environment"],
}

ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "summary": {"type": "STRING"},
        "attendanceRate": {"type": "NUMBER"},
        "roleBreakdown": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {"role": {"type": "STRING"}, "count": {"type": "INTEGER"}},
                "required": ["role", "count"],
            },
        },
        "predictedPortions": {"type": "NUMBER"},
        "anomalies": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["summary", "attendanceRate", "predictedPortions"],
}


class GeminiPhotoVerifier:
    """Ask Gemini whether a check-in photo shows a face and kitchen hygiene gear."""

    def __init__(self, client: GeminiClient, *, site_name: str = SITE_NAME):
        self._client = client
        self._site_name = site_name

    async def verify(self, image_jpeg: bytes) -> VerificationResult:
        prompt = (
            f"Analyze this volunteer check-in photo for a community kitchen ({self._site_name}).\n"
            "1. Determine if a real human face is clearly visible.\n"
            "2. Check for kitchen hygiene gear: Mask, Hairnet, or Apron.\n"
            "3. Describe the environment briefly.\n"
            "4. Return JSON."
        )
        result = await self._client.generate_json([jpeg_part(image_jpeg), text_part(prompt)], response_schema=PHOTO_SCHEMA)
        return build_verification(result)


def build_verification(result: dict[str, Any]) -> VerificationResult:
    environment = result.get("environment") or "unknown environment"
    is_verified = result.get("hasFace") is True
    if not is_verified:
        return VerificationResult(False, f"Warning: No clear face detected. Environment: {environment}")

    note = f"Verified: Face detected in {environment}."
    if result.get("hasHygieneGear"):
        note += f" Hygiene Check: PASS ({result.get('gearDescription') or 'Gear detected'})."
    else:
        note += " Hygiene Check: No mask/apron detected."
    return VerificationResult(True, note)


class GeminiOperationalAnalyzer:
    """Structured analysis of today's check-ins (role breakdown, portions, anomalies)."""

    def __init__(self, client: GeminiClient, table: ScheduleTable, *, site_name: str = SITE_NAME):
        self._client = client
        self._table = table
        self._site_name = site_name

    async def analyze(self, clock_ins: Sequence[AttendanceRecord], total_volunteers: int) -> OperationalAnalysis:
        context = {
            "totalRegistered": total_volunteers,
            "presentCount": len(clock_ins),
            "scheduleReference": {
                role: {"start": f"{w.start:%H:%M}", "end": f"{w.end:%H:%M}", "description": w.description}
                for role, w in self._table.items()
            },
            "attendanceLog": [
                {"role": r.activity or GENERAL_ROLE, "time": r.timestamp.strftime("%H:%M:%S"), "name": r.volunteer_name}
                for r in clock_ins
            ],
        }
        schedule_lines = "\n".join(f"- {role}: {w.start:%H:%M}-{w.end:%H:%M}" for role, w in self._table.items())
        prompt = (
            f"Analyze current operations for {self._site_name} based on this JSON context: "
            f"{json.dumps(context, ensure_ascii=False)}.\n\n"
            f"Roles & Schedules:\n{schedule_lines}\n\n"
            "Task:\n"
            "1. Calculate role breakdown (count per role).\n"
            "2. Predict portions (Assume 1 Cook = 300 portions, 1 Helper = 150 portions).\n"
            "3. Identify anomalies (Who is late based on their role schedule? Anyone working wrong hours?).\n"
            "4. Return JSON matching the schema."
        )
        result = await self._client.generate_json([text_part(prompt)], response_schema=ANALYSIS_SCHEMA)
        return parse_analysis(result)


def parse_analysis(result: dict[str, Any]) -> OperationalAnalysis:
    try:
        breakdown: dict[str, int] = {}
        for entry in result.get("roleBreakdown") or []:
            breakdown[str(entry["role"])] = int(entry["count"])
        return OperationalAnalysis(
            summary=str(result["summary"]),
            attendance_rate=float(result["attendanceRate"]),
            role_breakdown=breakdown,
            predicted_portions=int(result["predictedPortions"]),
            anomalies=tuple(str(a) for a in result.get("anomalies") or ()),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ExternalServiceError(f"Gemini analysis is missing fields: {exc}") from exc


class GeminiReportGenerator:
    """Free-text daily operational report for the coordinator."""

    def __init__(self, client: GeminiClient, *, site_name: str = SITE_NAME):
        self._client = client
        self._site_name = site_name

    async def generate(self, records: Sequence[AttendanceRecord]) -> str:
        summary = json.dumps(
            [
                {
                    "name": r.volunteer_name,
                    "type": r.event_type.value,
                    "activity": r.activity or "General",
                    "time": r.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                    "note": r.verification_note,
                }
                for r in records
            ],
            ensure_ascii=False,
        )
        prompt = (
            f'You are the Coordinator for "{self._site_name}" (Program Makan Bergizi Gratis).\n'
            "Analyze the following volunteer logs and provide a daily operational report.\n\n"
            f"Data:\n{summary}\n\n"
            "Please include:\n"
            "1. Total volunteers present and breakdown by Activity.\n"
            "2. Hygiene compliance summary.\n"
            "3. Operational irregularities based on check-in times vs roles.\n"
            "4. Motivating message."
        )
        text = await self._client.generate_text([text_part(prompt)])
        return text or "Could not generate report."
