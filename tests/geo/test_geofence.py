from __future__ import annotations

import math
from datetime import datetime

import pytest

from src.geo_attendance.geo_attendance.core.constants import EARTH_RADIUS_METERS
from src.geo_attendance.geo_attendance.geo.geofence import is_within_geofence
from src.geo_attendance.geo_attendance.geo.model import Coordinate, GeofenceConfig, LocationSample

CENTER = Coordinate(-6.2088, 106.8456)
FENCE = GeofenceConfig(center=CENTER, radius_meters=100, tolerance_meters=10)


def north_of_center(meters: float) -> Coordinate:
    return Coordinate(CENTER.latitude + math.degrees(meters / EARTH_RADIUS_METERS), CENTER.longitude)


def sample(coordinate: Coordinate, accuracy: float) -> LocationSample:
    return LocationSample(coordinate=coordinate, accuracy_meters=accuracy, captured_at=datetime(2026, 3, 2, 8, 0))


def test_inside_radius_with_good_accuracy():
    assert is_within_geofence(sample(north_of_center(50), 5), FENCE)


@pytest.mark.parametrize("accuracy", [0, 5, 10, 50])
def test_far_location_is_outside_regardless_of_accuracy(accuracy):
    assert not is_within_geofence(sample(north_of_center(500), accuracy), FENCE)


def test_poor_accuracy_fails_even_inside_radius():
    assert not is_within_geofence(sample(north_of_center(50), 15), FENCE)


def test_boundaries_are_inclusive():
    assert is_within_geofence(sample(north_of_center(99.9), 10), FENCE)


def test_moving_away_never_re_enters():
    results = [is_within_geofence(sample(north_of_center(m), 5), FENCE) for m in range(0, 300, 10)]
    first_outside = results.index(False)
    assert not any(results[first_outside:])


def test_tightening_radius_never_admits_more():
    wide = GeofenceConfig(center=CENTER, radius_meters=200, tolerance_meters=10)
    for m in range(0, 300, 25):
        s = sample(north_of_center(m), 5)
        if is_within_geofence(s, FENCE):
            assert is_within_geofence(s, wide)
