from datetime import time

import pytest

from src.kitchen_attendance.kitchen_attendance.core.exceptions import ValidationError
from src.kitchen_attendance.kitchen_attendance.schedules.service import ScheduleService
from src.kitchen_attendance.kitchen_attendance.schedules.static_table import StaticScheduleTable


def test_default_table_has_the_six_kitchen_roles():
    table = StaticScheduleTable()

    assert table.roles() == ["Gudang", "Helper", "Cook", "Pemorsian", "Driver", "Cuci Ompreng"]
    assert table.lookup("Driver").start == time(7, 0)
    assert table.lookup("Cuci Ompreng").end == time(21, 30)


def test_unknown_role_has_no_window():
    assert StaticScheduleTable().lookup("Umum") is None


def test_overnight_window_crosses_midnight():
    table = StaticScheduleTable()

    assert table.lookup("Gudang").crosses_midnight
    assert not table.lookup("Driver").crosses_midnight


def test_from_config_parses_hhmm():
    table = StaticScheduleTable.from_config(
        {"Kasir": {"start": "09:15", "end": "17:00", "description": "Front desk", "tasks": ["Cash"]}}
    )

    window = table.lookup("Kasir")
    assert window.start == time(9, 15)
    assert window.tasks == ("Cash",)
    assert window.label == "09:15 - 17:00"


def test_from_config_rejects_bad_times():
    with pytest.raises(ValidationError):
        StaticScheduleTable.from_config({"Kasir": {"start": "9am", "end": "17:00"}})


def test_normalize_role_falls_back_to_general():
    svc = ScheduleService(StaticScheduleTable())

    assert svc.normalize_role(" Cook ") == "Cook"
    assert svc.normalize_role("Kasir") == "Umum"
    assert svc.normalize_role(None) == "Umum"
    assert svc.shift_info("Umum") == "Jadwal Umum"
    assert svc.shift_info("Cook") == "01:00 - 09:00"
