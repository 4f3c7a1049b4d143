from __future__ import annotations

import io
from datetime import datetime

import pytest
from PIL import Image

from src.kitchen_attendance.kitchen_attendance.storage.memory import InMemoryStorage


@pytest.fixture
def fixed_now():
    return datetime(2026, 1, 5, 6, 45, 0)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def png_frame():
    buf = io.BytesIO()
    Image.new("RGB", (16, 12), color=(200, 120, 40)).save(buf, format="PNG")
    return buf.getvalue()
