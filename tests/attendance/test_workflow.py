from __future__ import annotations

import asyncio
from datetime import datetime

import httpx
import pytest

from src.kitchen_attendance.kitchen_attendance.ai.gemini_client import GeminiClient
from src.kitchen_attendance.kitchen_attendance.ai.gemini_services import GeminiPhotoVerifier
from src.kitchen_attendance.kitchen_attendance.ai.ports import VerificationResult
from src.kitchen_attendance.kitchen_attendance.attendance.evaluator import ShiftStatusEvaluator
from src.kitchen_attendance.kitchen_attendance.attendance.local_attendance_repository import AttendanceRecordStore
from src.kitchen_attendance.kitchen_attendance.attendance.model import LocationFix
from src.kitchen_attendance.kitchen_attendance.attendance.workflow import AttendanceWorkflow
from src.kitchen_attendance.kitchen_attendance.core.enums import AttendanceStatus, EventType, View, WorkflowState
from src.kitchen_attendance.kitchen_attendance.core.exceptions import (
    DeviceUnavailableError,
    ExternalServiceError,
    PolicyRejectionError,
    PreconditionError,
    ValidationError,
    WorkflowStateError,
)
from src.kitchen_attendance.kitchen_attendance.core.state import AppState
from src.kitchen_attendance.kitchen_attendance.schedules.service import ScheduleService
from src.kitchen_attendance.kitchen_attendance.schedules.static_table import StaticScheduleTable
from src.kitchen_attendance.kitchen_attendance.volunteers.local_volunteer_repository import VolunteerStore
from src.kitchen_attendance.kitchen_attendance.volunteers.model import Volunteer
from src.kitchen_attendance.kitchen_attendance.volunteers.service import VolunteerService

KITCHEN = LocationFix(latitude=-6.2607, longitude=106.8552, accuracy=12.0)


class FakeCamera:
    def __init__(self, frame):
        self.frame = frame
        self.released = False

    def capture(self):
        if self.frame is None:
            raise DeviceUnavailableError("Kamera belum aktif")
        return self.frame

    def release(self):
        self.released = True


class FakeDevices:
    def __init__(self, frame=None, *, location=KITCHEN, camera_error=None, location_error=None, hang_location=False):
        self.frame = frame
        self.location = location
        self.camera_error = camera_error
        self.location_error = location_error
        self.hang_location = hang_location
        self.cameras = []
        self.resets = 0

    async def open_camera(self):
        if self.camera_error:
            raise DeviceUnavailableError(self.camera_error)
        camera = FakeCamera(self.frame)
        self.cameras.append(camera)
        return camera

    async def locate(self):
        if self.hang_location:
            await asyncio.Future()
        if self.location_error:
            raise DeviceUnavailableError(self.location_error)
        return self.location

    def reset(self):
        self.resets += 1


class FakeVerifier:
    def __init__(self, result=None, *, error=None, delay=0.0):
        self.result = result or VerificationResult(True, "Verified: Face detected in kitchen.")
        self.error = error
        self.delay = delay
        self.calls = []

    async def verify(self, image_jpeg):
        self.calls.append(image_jpeg)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.result


def _build(storage, devices, verifier=None, *, redirect_delay=30.0, verify_timeout=1.0):
    state = AppState()
    table = StaticScheduleTable()
    volunteers = VolunteerStore(storage, now=datetime(2026, 1, 1))
    volunteers.add(Volunteer(id="3", name="Andi Driver", phone="0811", default_role="Driver", join_date=datetime(2026, 1, 1)))
    records = AttendanceRecordStore(storage)
    workflow = AttendanceWorkflow(
        state=state,
        volunteers=VolunteerService(volunteers, ScheduleService(table)),
        attendance=records,
        evaluator=ShiftStatusEvaluator(table),
        verifier=verifier or FakeVerifier(),
        devices=devices,
        verify_timeout=verify_timeout,
        redirect_delay=redirect_delay,
    )
    return workflow, records, state


async def _ready(workflow, volunteer_id="3"):
    await workflow.select_volunteer(volunteer_id)
    assert await workflow.wait_for_devices(timeout=1)


def test_late_driver_is_recorded_with_verification_and_message(storage, png_frame):
    workflow, records, state = _build(storage, FakeDevices(png_frame))

    async def scenario():
        await _ready(workflow)
        return await workflow.clock_in(now=datetime(2026, 1, 5, 6, 45))

    record = asyncio.run(scenario())

    assert record.status == AttendanceStatus.LATE
    assert record.event_type == EventType.CLOCK_IN
    assert record.is_verified is True
    assert "Verified" in record.verification_note
    assert record.verification_note.endswith("[Terlambat! Wajib hadir 30 menit sebelum 07:00]")
    assert record.photo_reference.startswith("data:image/jpeg;base64,")
    assert record.activity == "Driver"
    assert record.location == KITCHEN
    assert records.records() == (record,)
    assert workflow.phase == WorkflowState.RECORD_COMMITTED
    assert state.view == View.ATTENDANCE


def test_on_time_clock_in_has_verifier_note_only(storage, png_frame):
    workflow, _, _ = _build(storage, FakeDevices(png_frame))

    async def scenario():
        await _ready(workflow)
        return await workflow.clock_in(now=datetime(2026, 1, 5, 6, 0))

    record = asyncio.run(scenario())

    assert record.status == AttendanceStatus.ON_TIME
    assert record.verification_note == "Verified: Face detected in kitchen."


def test_too_early_is_rejected_without_capture(storage, png_frame):
    verifier = FakeVerifier()
    workflow, records, _ = _build(storage, FakeDevices(png_frame), verifier)

    async def scenario():
        await _ready(workflow)
        with pytest.raises(PolicyRejectionError) as exc:
            await workflow.clock_in(now=datetime(2026, 1, 5, 4, 29))
        return exc.value

    err = asyncio.run(scenario())

    assert str(err) == "Terlalu awal (Max 2 jam sebelum shift)"
    assert records.records() == ()
    assert verifier.calls == []
    assert workflow.phase == WorkflowState.CAPTURING_INPUT


@pytest.mark.parametrize(
    "verifier",
    [
        FakeVerifier(error=ExternalServiceError("quota exceeded")),
        FakeVerifier(delay=0.5),
    ],
    ids=["service-error", "timeout"],
)
def test_verifier_failure_still_commits_a_verified_record(storage, png_frame, verifier):
    workflow, records, _ = _build(storage, FakeDevices(png_frame), verifier, verify_timeout=0.05)

    async def scenario():
        await _ready(workflow)
        return await workflow.clock_in(now=datetime(2026, 1, 5, 6, 0))

    record = asyncio.run(scenario())

    assert record.is_verified is True
    assert record.verification_note == "AI Verification unavailable (Offline)"
    assert len(records.records()) == 1


@pytest.mark.parametrize(
    "payload",
    [["oops"], {"candidates": [{"content": {"parts": [{"text": None}]}}]}, {"candidates": "none"}],
    ids=["list-document", "null-text", "string-candidates"],
)
def test_malformed_gemini_reply_still_commits_a_verified_record(storage, png_frame, payload):
    async def scenario():
        client = GeminiClient("key", transport=httpx.MockTransport(lambda request: httpx.Response(200, json=payload)))
        workflow, records, _ = _build(storage, FakeDevices(png_frame), GeminiPhotoVerifier(client))
        try:
            await _ready(workflow)
            record = await workflow.clock_in(now=datetime(2026, 1, 5, 6, 0))
        finally:
            await client.close()
        return record, records

    record, records = asyncio.run(scenario())

    assert record.is_verified is True
    assert record.verification_note == "AI Verification unavailable (Offline)"
    assert records.records() == (record,)


def test_verifier_crash_falls_back_instead_of_blocking(storage, png_frame):
    workflow, records, _ = _build(storage, FakeDevices(png_frame), FakeVerifier(error=RuntimeError("bug")))

    async def scenario():
        await _ready(workflow)
        return await workflow.clock_in(now=datetime(2026, 1, 5, 6, 0))

    record = asyncio.run(scenario())

    assert record.verification_note == "AI Verification unavailable (Offline)"
    assert len(records.records()) == 1
    assert workflow.phase == WorkflowState.RECORD_COMMITTED


def test_unreadable_frame_records_without_photo(storage):
    verifier = FakeVerifier()
    workflow, records, _ = _build(storage, FakeDevices(frame=b"not an image"), verifier)

    async def scenario():
        await _ready(workflow)
        return await workflow.clock_in(now=datetime(2026, 1, 5, 6, 0))

    record = asyncio.run(scenario())

    assert record.photo_reference == ""
    assert record.verification_note == "AI Verification unavailable (Offline)"
    assert verifier.calls == []
    assert records.records() == (record,)


def test_selecting_during_verification_keeps_the_new_session(storage, png_frame):
    devices = FakeDevices(png_frame)
    workflow, records, state = _build(storage, devices, FakeVerifier(delay=0.1), redirect_delay=0)

    async def scenario():
        await _ready(workflow)
        pending = asyncio.create_task(workflow.clock_in(now=datetime(2026, 1, 5, 6, 0)))
        await asyncio.sleep(0.02)
        assert workflow.phase == WorkflowState.AWAITING_VERIFICATION

        await workflow.select_volunteer("2")
        assert await workflow.wait_for_devices(timeout=1)
        record = await pending
        await asyncio.sleep(0.05)
        return record

    record = asyncio.run(scenario())

    assert record.volunteer_id == "3"
    assert records.records() == (record,)
    assert workflow.phase == WorkflowState.CAPTURING_INPUT
    assert workflow.volunteer.id == "2"
    assert workflow.last_outcome is None
    assert workflow.camera_ready
    assert state.view == View.ATTENDANCE
    assert devices.cameras[0].released is True
    assert devices.cameras[1].released is False


def test_missing_camera_frame_records_without_photo(storage):
    verifier = FakeVerifier()
    workflow, _, _ = _build(storage, FakeDevices(frame=None), verifier)

    async def scenario():
        await _ready(workflow)
        return await workflow.clock_in(now=datetime(2026, 1, 5, 6, 0))

    record = asyncio.run(scenario())

    assert record.photo_reference == ""
    assert record.verification_note == "AI Verification unavailable (Offline)"
    assert verifier.calls == []


def test_clock_in_requires_a_location_fix(storage, png_frame):
    workflow, records, _ = _build(storage, FakeDevices(png_frame, hang_location=True))

    async def scenario():
        await workflow.select_volunteer("3")
        await asyncio.sleep(0)
        assert workflow.camera_ready
        with pytest.raises(PreconditionError):
            await workflow.clock_in(now=datetime(2026, 1, 5, 6, 0))
        workflow.close()

    asyncio.run(scenario())

    assert records.records() == ()


def test_clock_in_requires_a_volunteer(storage):
    workflow, _, _ = _build(storage, FakeDevices())

    with pytest.raises(PreconditionError):
        asyncio.run(workflow.clock_in(now=datetime(2026, 1, 5, 6, 0)))


def test_location_denied_is_reported_and_not_fatal(storage, png_frame):
    workflow, _, _ = _build(storage, FakeDevices(png_frame, location_error="User denied Geolocation"))

    async def scenario():
        await _ready(workflow)
        assert workflow.location is None
        assert workflow.location_error == "User denied Geolocation"
        with pytest.raises(PreconditionError):
            await workflow.clock_out(now=datetime(2026, 1, 5, 12, 0))

    asyncio.run(scenario())


def test_unknown_volunteer_cannot_be_selected(storage):
    workflow, _, _ = _build(storage, FakeDevices())

    with pytest.raises(ValidationError):
        asyncio.run(workflow.select_volunteer("nope"))
    assert workflow.phase == WorkflowState.SELECTING_VOLUNTEER


def test_search_is_case_insensitive(storage):
    workflow, _, _ = _build(storage, FakeDevices())

    assert [v.name for v in workflow.search("siti")] == ["Siti Aminah"]
    assert len(workflow.search("")) == 3


def test_clock_out_is_on_time_regardless_of_hour(storage, png_frame):
    workflow, _, _ = _build(storage, FakeDevices(png_frame))

    async def scenario():
        await _ready(workflow)
        return await workflow.clock_out(now=datetime(2026, 1, 5, 23, 0))

    record = asyncio.run(scenario())

    assert record.event_type == EventType.CLOCK_OUT
    assert record.status == AttendanceStatus.ON_TIME


def test_second_action_needs_a_retry(storage, png_frame):
    workflow, records, _ = _build(storage, FakeDevices(png_frame))

    async def scenario():
        await _ready(workflow)
        await workflow.clock_in(now=datetime(2026, 1, 5, 6, 0))
        with pytest.raises(WorkflowStateError):
            await workflow.clock_out(now=datetime(2026, 1, 5, 6, 1))

        workflow.retry_capture()
        assert workflow.phase == WorkflowState.CAPTURING_INPUT
        assert workflow.last_outcome is None
        assert workflow.volunteer.id == "3"
        await workflow.clock_out(now=datetime(2026, 1, 5, 6, 1))

    asyncio.run(scenario())

    assert [r.event_type for r in records.records()] == [EventType.CLOCK_OUT, EventType.CLOCK_IN]


def test_retry_without_a_capture_is_rejected(storage):
    workflow, _, _ = _build(storage, FakeDevices())

    with pytest.raises(WorkflowStateError):
        workflow.retry_capture()


def test_change_volunteer_releases_the_camera(storage, png_frame):
    devices = FakeDevices(png_frame)
    workflow, _, _ = _build(storage, devices)

    async def scenario():
        await _ready(workflow)
        workflow.change_volunteer()

    asyncio.run(scenario())

    assert devices.cameras[0].released is True
    assert workflow.phase == WorkflowState.SELECTING_VOLUNTEER
    assert workflow.volunteer is None
    assert devices.resets == 2
    assert workflow.location is None
    assert not workflow.camera_ready


def test_commit_redirects_to_history(storage, png_frame):
    devices = FakeDevices(png_frame)
    workflow, _, state = _build(storage, devices, redirect_delay=0)

    async def scenario():
        await _ready(workflow)
        await workflow.clock_in(now=datetime(2026, 1, 5, 6, 0))
        await asyncio.sleep(0.05)

    asyncio.run(scenario())

    assert state.view == View.HISTORY
    assert workflow.phase == WorkflowState.SELECTING_VOLUNTEER
    assert devices.cameras[0].released is True
