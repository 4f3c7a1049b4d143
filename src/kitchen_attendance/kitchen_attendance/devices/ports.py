from __future__ import annotations

from typing import Protocol

from ..attendance.model import LocationFix


class CameraSession(Protocol):
    """An open camera feed. `capture` grabs the current still frame (encoded image bytes)."""

    def capture(self) -> bytes:
        raise NotImplementedError

    def release(self) -> None:
        raise NotImplementedError


class DeviceGateway(Protocol):
    """Acquires the kiosk's camera and geolocation.

    Both calls may wait indefinitely (e.g. permission prompt never answered) and
    raise DeviceUnavailableError when access is denied.
    """

    async def open_camera(self) -> CameraSession:
        raise NotImplementedError

    async def locate(self) -> LocationFix:
        raise NotImplementedError

    def reset(self) -> None:
        """Forget anything acquired for the capture session that just ended."""
        raise NotImplementedError
