from __future__ import annotations

import pytest

from src.geo_attendance.geo_attendance.attendance.formatting import format_late_minutes, format_work_hours


@pytest.mark.parametrize(
    "hours,expected",
    [(None, "-"), (8.0, "8h"), (7.5, "7h 30m"), (0.25, "0h 15m"), (8.999, "9h")],
)
def test_format_work_hours(hours, expected):
    assert format_work_hours(hours) == expected


@pytest.mark.parametrize(
    "minutes,expected",
    [(0, "On time"), (20, "20m late"), (60, "1h late"), (65, "1h 5m late")],
)
def test_format_late_minutes(minutes, expected):
    assert format_late_minutes(minutes) == expected
