from __future__ import annotations

import asyncio

import pytest

from src.kitchen_attendance.kitchen_attendance.attendance.model import LocationFix
from src.kitchen_attendance.kitchen_attendance.core.exceptions import DeviceUnavailableError
from src.kitchen_attendance.kitchen_attendance.devices.browser import BrowserDevices

KITCHEN = LocationFix(latitude=-6.2607, longitude=106.8552, accuracy=12.0)


def test_fix_posted_before_locate_is_handed_over():
    devices = BrowserDevices()

    async def scenario():
        await devices.submit_location(KITCHEN)
        return await devices.locate()

    assert asyncio.run(scenario()) == KITCHEN


def test_waiting_locate_gets_the_next_fix():
    devices = BrowserDevices()

    async def scenario():
        pending = asyncio.create_task(devices.locate())
        await asyncio.sleep(0)
        await devices.submit_location(KITCHEN)
        return await pending

    assert asyncio.run(scenario()) == KITCHEN


def test_reported_error_fails_the_waiting_locate():
    devices = BrowserDevices()

    async def scenario():
        pending = asyncio.create_task(devices.locate())
        await asyncio.sleep(0)
        await devices.report_location_error("User denied Geolocation")
        await pending

    with pytest.raises(DeviceUnavailableError, match="User denied Geolocation"):
        asyncio.run(scenario())


def test_reset_drops_a_fix_from_the_previous_session():
    devices = BrowserDevices()

    async def scenario():
        await devices.submit_location(KITCHEN)
        devices.reset()
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(devices.locate(), timeout=0.05)

    asyncio.run(scenario())


def test_frames_need_an_open_camera(png_frame):
    devices = BrowserDevices()

    async def scenario():
        with pytest.raises(DeviceUnavailableError):
            await devices.submit_frame(png_frame)
        camera = await devices.open_camera()
        await devices.submit_frame(png_frame)
        assert camera.capture() == png_frame
        devices.reset()
        with pytest.raises(DeviceUnavailableError):
            await devices.submit_frame(png_frame)

    asyncio.run(scenario())
