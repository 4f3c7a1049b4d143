from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .ai.gemini_client import DEFAULT_MODEL, GeminiClient
from .ai.gemini_services import GeminiOperationalAnalyzer, GeminiPhotoVerifier, GeminiReportGenerator
from .ai.offline import OfflineAI
from .ai.ports import OperationalAnalyzer, PhotoVerifier, ReportGenerator
from .attendance.evaluator import ShiftStatusEvaluator
from .attendance.local_attendance_repository import AttendanceRecordStore
from .attendance.service import AttendanceService
from .attendance.workflow import AttendanceWorkflow
from .common.datetime_utils import now_local
from .core import constants
from .core.state import AppState
from .devices.browser import BrowserDevices
from .kiosk.runner import KioskRunner
from .reports.service import ReportService
from .rules.service import RulesService
from .schedules.service import ScheduleService
from .schedules.static_table import StaticScheduleTable
from .storage.base import KeyValueStorage
from .storage.factory import build_storage
from .volunteers.local_volunteer_repository import VolunteerStore
from .volunteers.service import VolunteerService


@dataclass(frozen=True)
class Container:
    storage: KeyValueStorage
    state: AppState

    schedule_table: StaticScheduleTable
    volunteers_repo: VolunteerStore
    attendance_repo: AttendanceRecordStore
    devices: BrowserDevices
    runner: KioskRunner
    gemini: Optional[GeminiClient]

    schedule_service: ScheduleService
    volunteer_service: VolunteerService
    rules_service: RulesService
    attendance_service: AttendanceService
    report_service: ReportService
    workflow: AttendanceWorkflow

    def shutdown(self) -> None:
        if not self.runner.running:
            return

        async def _close() -> None:
            self.workflow.close()
            if self.gemini is not None:
                await self.gemini.close()

        self.runner.run(_close())
        self.runner.stop()


def build_container(
    *,
    storage_config: dict,
    ai_config: dict,
    attendance_config: dict,
    storage: KeyValueStorage | None = None,
) -> Container:
    storage = storage or build_storage(storage_config)
    state = AppState()

    schedules_raw = attendance_config.get("schedules")
    schedule_table = StaticScheduleTable.from_config(schedules_raw) if schedules_raw else StaticScheduleTable()
    volunteers_repo = VolunteerStore(storage, now=now_local())
    attendance_repo = AttendanceRecordStore(storage)

    buffer_minutes = int(attendance_config.get("arrival_buffer_minutes", constants.MANDATORY_ARRIVAL_MINUTES))
    early_minutes = int(attendance_config.get("early_checkin_window_minutes", constants.EARLY_CHECKIN_WINDOW_MINUTES))
    ai_timeout = float(ai_config.get("timeout_seconds", constants.DEFAULT_AI_TIMEOUT_SECONDS))
    site_name = str(ai_config.get("site_name") or constants.SITE_NAME)

    gemini: Optional[GeminiClient] = None
    verifier: PhotoVerifier
    analyzer: OperationalAnalyzer
    generator: ReportGenerator
    if ai_config.get("api_key"):
        gemini = GeminiClient(str(ai_config["api_key"]), model=str(ai_config.get("model") or DEFAULT_MODEL), timeout=ai_timeout)
        verifier = GeminiPhotoVerifier(gemini, site_name=site_name)
        analyzer = GeminiOperationalAnalyzer(gemini, schedule_table, site_name=site_name)
        generator = GeminiReportGenerator(gemini, site_name=site_name)
    else:
        verifier = analyzer = generator = OfflineAI()

    schedule_service = ScheduleService(schedule_table)
    volunteer_service = VolunteerService(volunteers_repo, schedule_service)
    rules_service = RulesService(
        storage,
        schedule_service,
        arrival_buffer_minutes=buffer_minutes,
        early_window_minutes=early_minutes,
    )
    state.show_rules = rules_service.needs_acknowledgement()
    attendance_service = AttendanceService(attendance_repo, volunteers_repo)
    report_service = ReportService(
        attendance_repo,
        volunteers_repo,
        analyzer=analyzer,
        generator=generator,
        timeout=ai_timeout,
    )

    devices = BrowserDevices()
    workflow = AttendanceWorkflow(
        state=state,
        volunteers=volunteer_service,
        attendance=attendance_repo,
        evaluator=ShiftStatusEvaluator(
            schedule_table,
            arrival_buffer_minutes=buffer_minutes,
            early_window_minutes=early_minutes,
        ),
        verifier=verifier,
        devices=devices,
        verify_timeout=ai_timeout,
        redirect_delay=float(
            attendance_config.get("history_redirect_delay_seconds", constants.HISTORY_REDIRECT_DELAY_SECONDS)
        ),
    )

    runner = KioskRunner(call_timeout=ai_timeout + 10)
    runner.start()

    return Container(
        storage=storage,
        state=state,
        schedule_table=schedule_table,
        volunteers_repo=volunteers_repo,
        attendance_repo=attendance_repo,
        devices=devices,
        runner=runner,
        gemini=gemini,
        schedule_service=schedule_service,
        volunteer_service=volunteer_service,
        rules_service=rules_service,
        attendance_service=attendance_service,
        report_service=report_service,
        workflow=workflow,
    )
