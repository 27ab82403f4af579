from __future__ import annotations

import math

import pytest

from src.geo_attendance.geo_attendance.core.constants import EARTH_RADIUS_METERS
from src.geo_attendance.geo_attendance.geo.distance import distance_meters
from src.geo_attendance.geo_attendance.geo.model import Coordinate

OFFICE = Coordinate(-6.2088, 106.8456)


def test_distance_to_self_is_zero():
    assert distance_meters(OFFICE, OFFICE) == 0


def test_distance_is_symmetric():
    other = Coordinate(-6.1754, 106.8272)
    assert distance_meters(OFFICE, other) == pytest.approx(distance_meters(other, OFFICE))


def test_one_degree_of_latitude():
    expected = 2 * math.pi * EARTH_RADIUS_METERS / 360
    assert distance_meters(Coordinate(0, 0), Coordinate(1, 0)) == pytest.approx(expected, rel=1e-9)


def test_known_city_distance():
    # Jakarta (Monas) -> Bandung is roughly 116 km as the crow flies
    bandung = Coordinate(-6.9175, 107.6191)
    assert distance_meters(OFFICE, bandung) == pytest.approx(116_000, rel=0.03)


def test_nan_propagates():
    assert math.isnan(distance_meters(Coordinate(float("nan"), 0), OFFICE))
