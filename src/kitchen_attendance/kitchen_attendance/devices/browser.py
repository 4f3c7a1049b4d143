from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..attendance.model import LocationFix
from ..core.exceptions import DeviceUnavailableError

logger = logging.getLogger(__name__)


class BrowserCamera:
    """Camera session whose frames are pushed by the kiosk browser."""

    def __init__(self) -> None:
        self._frame: Optional[bytes] = None
        self._released = False

    def push_frame(self, frame: bytes) -> None:
        if not self._released:
            self._frame = frame

    def capture(self) -> bytes:
        if self._released or not self._frame:
            raise DeviceUnavailableError("Kamera belum aktif")
        return self._frame

    def release(self) -> None:
        self._released = True
        self._frame = None


class BrowserDevices:
    """DeviceGateway fed by the kiosk page (getUserMedia / navigator.geolocation).

    The browser owns the real devices; it posts frames, location fixes and
    permission errors, which resolve the acquisitions the workflow is awaiting.
    All methods must run on the kiosk event loop.
    """

    def __init__(self) -> None:
        self._camera: Optional[BrowserCamera] = None
        self._waiters: list[asyncio.Future] = []
        self._queued: Optional[LocationFix | DeviceUnavailableError] = None

    async def open_camera(self) -> BrowserCamera:
        self._camera = BrowserCamera()
        return self._camera

    async def locate(self) -> LocationFix:
        if self._queued is not None:
            queued, self._queued = self._queued, None
            if isinstance(queued, DeviceUnavailableError):
                raise queued
            return queued

        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            return await waiter
        finally:
            if waiter in self._waiters:
                self._waiters.remove(waiter)

    def reset(self) -> None:
        # A fix nobody awaited belongs to the previous volunteer.
        self._queued = None
        self._camera = None

    async def submit_frame(self, frame: bytes) -> None:
        if self._camera is None:
            raise DeviceUnavailableError("Kamera belum aktif")
        self._camera.push_frame(frame)

    async def submit_location(self, fix: LocationFix) -> None:
        self._resolve(fix)

    async def report_location_error(self, message: str) -> None:
        logger.info("browser reported geolocation error: %s", message)
        self._resolve(DeviceUnavailableError(message or "Lokasi tidak tersedia"))

    def _resolve(self, outcome: LocationFix | DeviceUnavailableError) -> None:
        pending = [w for w in self._waiters if not w.done()]
        if not pending:
            self._queued = outcome
            return
        for waiter in pending:
            if isinstance(outcome, DeviceUnavailableError):
                waiter.set_exception(outcome)
            else:
                waiter.set_result(outcome)
