from __future__ import annotations

from datetime import datetime

import pytest

from src.geo_attendance.geo_attendance.core.exceptions import InvalidLocationError
from src.geo_attendance.geo_attendance.geo.model import LocationSample

RECEIVED = datetime(2026, 3, 2, 8, 30)


def test_parses_full_payload():
    s = LocationSample.from_payload(
        {
            "latitude": "-6.2088",
            "longitude": 106.8456,
            "accuracy": 8,
            "address": "  Jl. Medan Merdeka  ",
            "timestamp": "2026-03-02T08:29:55",
            "altitude": 12.5,
            "heading": None,
            "speed": "n/a",
        },
        received_at=RECEIVED,
    )

    assert s.coordinate.latitude == -6.2088
    assert s.accuracy_meters == 8.0
    assert s.address == "Jl. Medan Merdeka"
    assert s.captured_at == datetime(2026, 3, 2, 8, 29, 55)
    assert s.altitude == 12.5
    assert s.heading is None
    assert s.speed is None


def test_missing_timestamp_uses_receive_time_and_address_falls_back_to_coordinates():
    s = LocationSample.from_payload({"latitude": -6.2, "longitude": 106.8, "accuracy": 3}, received_at=RECEIVED)

    assert s.captured_at == RECEIVED
    assert s.display_address == "-6.200000, 106.800000"


@pytest.mark.parametrize(
    "payload",
    [
        {"latitude": 91, "longitude": 0, "accuracy": 5},
        {"latitude": 0, "longitude": -180.5, "accuracy": 5},
        {"latitude": "north", "longitude": 0, "accuracy": 5},
        {"latitude": True, "longitude": 0, "accuracy": 5},
        {"longitude": 0, "accuracy": 5},
        {"latitude": 0, "longitude": 0},
        {"latitude": 0, "longitude": 0, "accuracy": -1},
        {"latitude": float("nan"), "longitude": 0, "accuracy": 5},
        {"latitude": 0, "longitude": 0, "accuracy": 5, "timestamp": "yesterday"},
    ],
)
def test_rejects_malformed_location(payload):
    with pytest.raises(InvalidLocationError):
        LocationSample.from_payload(payload, received_at=RECEIVED)


def test_rejects_non_object():
    with pytest.raises(InvalidLocationError):
        LocationSample.from_payload([1, 2], received_at=RECEIVED)
