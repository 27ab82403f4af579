from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from src.geo_attendance.geo_attendance.shifts.model import default_shift_window
from src.geo_attendance.geo_attendance.shifts.validator import validate_check_in_time, validate_check_out_time

WINDOW = default_shift_window()


def at(hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2026, 3, 2, hour, minute, second)


@pytest.mark.parametrize("t", [at(6, 0), at(8, 15), at(10, 0), at(10, 0, 59)])
def test_check_in_inside_window(t):
    assert validate_check_in_time(t, WINDOW).ok


def test_check_in_too_early_names_lower_boundary():
    result = validate_check_in_time(at(5, 59), WINDOW)
    assert not result.ok
    assert result.boundary == "earliest"
    assert result.message == "Check-in is only allowed after 06:00"


def test_check_in_too_late_names_upper_boundary():
    result = validate_check_in_time(at(10, 1), WINDOW)
    assert not result.ok
    assert result.boundary == "latest"
    assert "10:00" in result.message


def test_check_out_window():
    assert validate_check_out_time(at(17, 30), WINDOW).ok
    assert validate_check_out_time(at(13, 59), WINDOW).message == "Check-out is only allowed after 14:00"
    assert validate_check_out_time(at(22, 1), WINDOW).boundary == "latest"


def test_disabled_window_always_passes():
    open_window = replace(WINDOW, check_in_window_enabled=False, check_out_window_enabled=False)
    assert validate_check_in_time(at(3, 0), open_window).ok
    assert validate_check_out_time(at(23, 30), open_window).ok
