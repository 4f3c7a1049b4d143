from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..ai.fallback import call_with_fallback
from ..ai.ports import VERIFICATION_UNAVAILABLE, PhotoVerifier, VerificationResult
from ..common.datetime_utils import now_local, truncate_to_millis
from ..core.constants import DEFAULT_AI_TIMEOUT_SECONDS, HISTORY_REDIRECT_DELAY_SECONDS
from ..core.enums import EventType, View, WorkflowState
from ..core.exceptions import DeviceUnavailableError, PreconditionError, ValidationError, WorkflowStateError
from ..core.state import AppState
from ..devices.imaging import Snapshot, encode_snapshot
from ..devices.ports import CameraSession, DeviceGateway
from ..volunteers.model import Volunteer
from ..volunteers.service import VolunteerService
from .evaluator import ShiftStatusEvaluator
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, LocationFix
from .repository import AttendanceRepository
from .strategies.base import StatusDecision

logger = logging.getLogger(__name__)

NOT_READY_MESSAGE = "Sistem belum siap. Pastikan kamera & lokasi aktif."


@dataclass(frozen=True)
class CaptureOutcome:
    """What the last committed attendance action produced."""

    snapshot: Optional[Snapshot]
    verification: VerificationResult
    record: AttendanceRecord


class AttendanceWorkflow:
    """Kiosk attendance state machine.

    SELECTING_VOLUNTEER -> CAPTURING_INPUT -> AWAITING_VERIFICATION -> RECORD_COMMITTED,
    with retry_capture() going back to CAPTURING_INPUT and change_volunteer()
    back to SELECTING_VOLUNTEER. Must be driven from a single event loop.
    """

    def __init__(
        self,
        *,
        state: AppState,
        volunteers: VolunteerService,
        attendance: AttendanceRepository,
        evaluator: ShiftStatusEvaluator,
        verifier: PhotoVerifier,
        devices: DeviceGateway,
        strategy_factory: AttendanceStrategyFactory | None = None,
        verify_timeout: float = DEFAULT_AI_TIMEOUT_SECONDS,
        redirect_delay: float = HISTORY_REDIRECT_DELAY_SECONDS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._state = state
        self._volunteers = volunteers
        self._attendance = attendance
        self._evaluator = evaluator
        self._verifier = verifier
        self._devices = devices
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._verify_timeout = float(verify_timeout)
        self._redirect_delay = float(redirect_delay)
        self._clock = clock

        self._phase = WorkflowState.SELECTING_VOLUNTEER
        self._volunteer: Optional[Volunteer] = None
        self._camera: Optional[CameraSession] = None
        self._location: Optional[LocationFix] = None
        self._camera_error: Optional[str] = None
        self._location_error: Optional[str] = None
        self._acquisitions: list[asyncio.Task] = []
        self._redirect: Optional[asyncio.TimerHandle] = None
        self._last: Optional[CaptureOutcome] = None
        # Bumped whenever the capture session ends; a commit only touches the session it started in.
        self._session = 0

    @property
    def phase(self) -> WorkflowState:
        return self._phase

    @property
    def volunteer(self) -> Optional[Volunteer]:
        return self._volunteer

    @property
    def location(self) -> Optional[LocationFix]:
        return self._location

    @property
    def location_error(self) -> Optional[str]:
        return self._location_error

    @property
    def camera_ready(self) -> bool:
        return self._camera is not None

    @property
    def camera_error(self) -> Optional[str]:
        return self._camera_error

    @property
    def last_outcome(self) -> Optional[CaptureOutcome]:
        return self._last

    # region Selection
    def search(self, query: Optional[str]) -> list[Volunteer]:
        return self._volunteers.search(query)

    async def select_volunteer(self, volunteer_id: str) -> Volunteer:
        volunteer = self._volunteers.get(volunteer_id)
        self._cancel_redirect()
        self.change_volunteer()

        self._volunteer = volunteer
        self._phase = WorkflowState.CAPTURING_INPUT
        self._state.navigate(View.ATTENDANCE)
        # Neither acquisition blocks selection; a denied permission may leave one pending forever.
        self._acquisitions = [
            asyncio.create_task(self._acquire_camera(), name="kiosk-camera"),
            asyncio.create_task(self._acquire_location(), name="kiosk-location"),
        ]
        logger.info("volunteer %s (%s) selected", volunteer.name, volunteer.default_role)
        return volunteer

    async def wait_for_devices(self, timeout: float | None = None) -> bool:
        """Wait until both acquisitions settled. Returns False if one is still pending."""

        if not self._acquisitions:
            return True
        _, pending = await asyncio.wait(self._acquisitions, timeout=timeout)
        return not pending

    def change_volunteer(self) -> None:
        self._release_devices()
        self._session += 1
        self._volunteer = None
        self._last = None
        self._phase = WorkflowState.SELECTING_VOLUNTEER

    def close(self) -> None:
        self._cancel_redirect()
        self.change_volunteer()

    async def _acquire_camera(self) -> None:
        try:
            self._camera = await self._devices.open_camera()
            self._camera_error = None
        except DeviceUnavailableError as exc:
            self._camera_error = str(exc)
            logger.warning("camera unavailable: %s", exc)

    async def _acquire_location(self) -> None:
        try:
            self._location = await self._devices.locate()
            self._location_error = None
        except DeviceUnavailableError as exc:
            self._location_error = str(exc)
            logger.warning("location unavailable: %s", exc)

    def _release_devices(self) -> None:
        for task in self._acquisitions:
            task.cancel()
        self._acquisitions = []
        if self._camera is not None:
            self._camera.release()
        self._camera = None
        self._location = None
        self._camera_error = None
        self._location_error = None
        self._devices.reset()

    # endregion

    # region Attendance actions
    async def clock_in(self, now: datetime | None = None) -> AttendanceRecord:
        return await self._commit(EventType.CLOCK_IN, now)

    async def clock_out(self, now: datetime | None = None) -> AttendanceRecord:
        return await self._commit(EventType.CLOCK_OUT, now)

    def retry_capture(self) -> None:
        """Discard the last capture and go back to the live camera for the same volunteer."""

        if self._phase == WorkflowState.CAPTURING_INPUT:
            return
        if self._phase != WorkflowState.RECORD_COMMITTED:
            raise WorkflowStateError("Tidak ada foto untuk diulang")
        self._cancel_redirect()
        self._last = None
        self._phase = WorkflowState.CAPTURING_INPUT

    async def _commit(self, event_type: EventType, now: datetime | None) -> AttendanceRecord:
        volunteer, location = self._volunteer, self._location
        if volunteer is None or location is None:
            raise PreconditionError(NOT_READY_MESSAGE)
        if self._phase != WorkflowState.CAPTURING_INPUT:
            raise WorkflowStateError("Absensi sedang diproses, ulangi foto untuk mencoba lagi")

        now = truncate_to_millis(now or self._clock())
        decision = self._decide(event_type, volunteer, now)

        session = self._session
        self._phase = WorkflowState.AWAITING_VERIFICATION
        try:
            snapshot = self._capture()
            verification = await self._verify(snapshot)
            record = AttendanceRecord(
                id=self._attendance.next_id(now),
                volunteer_id=volunteer.id,
                volunteer_name=volunteer.name,
                event_type=event_type,
                status=decision.status,
                timestamp=now,
                photo_reference=snapshot.data_url if snapshot else "",
                location=location,
                verification_note=verification.note + decision.note,
                is_verified=verification.is_verified,
                activity=volunteer.default_role,
            )
            self._attendance.append(record)
        except BaseException:
            if session == self._session:
                self._phase = WorkflowState.CAPTURING_INPUT
            raise

        if session != self._session:
            # The kiosk moved on while verification was pending; the new session keeps its state.
            logger.info("record %s committed after %s left the attendance screen", record.id, volunteer.name)
            return record

        self._last = CaptureOutcome(snapshot=snapshot, verification=verification, record=record)
        self._phase = WorkflowState.RECORD_COMMITTED
        self._schedule_redirect()
        return record

    def _decide(self, event_type: EventType, volunteer: Volunteer, now: datetime) -> StatusDecision:
        if event_type == EventType.CLOCK_IN:
            verdict = self._evaluator.evaluate(volunteer.default_role, now)
            # TOO_EARLY raises PolicyRejectionError before anything is captured.
            return self._factory.for_clock_in(verdict).decide_clock_in(verdict)
        return self._factory.for_clock_out().decide_clock_out()

    def _capture(self) -> Optional[Snapshot]:
        if self._camera is None:
            return None
        try:
            raw = self._camera.capture()
        except DeviceUnavailableError as exc:
            logger.warning("no frame captured: %s", exc)
            return None
        try:
            return encode_snapshot(raw)
        except ValidationError as exc:
            logger.warning("captured frame is unusable: %s", exc)
            return None

    async def _verify(self, snapshot: Optional[Snapshot]) -> VerificationResult:
        if snapshot is None:
            return VERIFICATION_UNAVAILABLE
        return await call_with_fallback(
            self._verifier.verify(snapshot.jpeg),
            timeout=self._verify_timeout,
            fallback=VERIFICATION_UNAVAILABLE,
            label="photo verification",
        )

    # endregion

    # region Navigation
    def _schedule_redirect(self) -> None:
        self._cancel_redirect()
        loop = asyncio.get_running_loop()
        self._redirect = loop.call_later(self._redirect_delay, self._show_history)

    def _cancel_redirect(self) -> None:
        if self._redirect is not None:
            self._redirect.cancel()
            self._redirect = None

    def _show_history(self) -> None:
        # Leaving the attendance screen ends the capture session.
        self._redirect = None
        self.change_volunteer()
        self._state.navigate(View.HISTORY)

    # endregion
