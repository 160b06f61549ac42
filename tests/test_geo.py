from __future__ import annotations

import math

import pytest

from fit_clean.geo import (
    EARTH_RADIUS_M,
    degrees_to_semicircles,
    distance_m,
    haversine,
    semicircles_to_degrees,
)


@pytest.mark.parametrize(
    ("semicircles", "degrees"),
    [
        (0, 0.0),
        (2**31, 180.0),
        (-(2**31), -180.0),
        (2**30, 90.0),
    ],
)
def test_semicircles_to_degrees(semicircles: int, degrees: float) -> None:
    assert semicircles_to_degrees(semicircles) == pytest.approx(degrees)


def test_degrees_to_semicircles_truncates_toward_zero() -> None:
    one_unit = 180.0 / 2**31
    assert degrees_to_semicircles(2.9 * one_unit) == 2
    assert degrees_to_semicircles(-2.9 * one_unit) == -2


@pytest.mark.parametrize("value", [0, 1, -1, 12345, -987654321, 537_800_000, 2**31 - 1, -(2**31)])
def test_semicircle_round_trip_within_truncation(value: int) -> None:
    assert abs(degrees_to_semicircles(semicircles_to_degrees(value)) - value) <= 1


def test_haversine() -> None:
    assert haversine(0.0) == 0.0
    assert haversine(math.pi) == pytest.approx(1.0)
    assert haversine(math.pi / 2) == pytest.approx(0.5)


def test_distance_identity() -> None:
    lat, lon = degrees_to_semicircles(45.07), degrees_to_semicircles(7.69)
    assert distance_m(lat, lon, lat, lon) == 0.0


@pytest.mark.parametrize(
    ("a", "b"),
    [
        ((45.07, 7.69), (45.08, 7.70)),
        ((-33.9, 151.2), (51.5, -0.12)),
        ((0.0, 179.9), (0.0, -179.9)),
    ],
)
def test_distance_symmetry(a: tuple[float, float], b: tuple[float, float]) -> None:
    a_s = [degrees_to_semicircles(v) for v in a]
    b_s = [degrees_to_semicircles(v) for v in b]
    assert distance_m(*a_s, *b_s) == pytest.approx(distance_m(*b_s, *a_s), rel=1e-12)


def test_distance_one_degree_of_latitude() -> None:
    d = distance_m(0, 0, degrees_to_semicircles(1.0), 0)
    assert d == pytest.approx(EARTH_RADIUS_M * math.pi / 180.0, rel=1e-6)


def test_distance_antipodes_is_half_circumference() -> None:
    d = distance_m(0, 0, 0, 2**31 - 1)
    assert d == pytest.approx(math.pi * EARTH_RADIUS_M, rel=1e-6)


def test_distance_custom_radius() -> None:
    lat2 = degrees_to_semicircles(10.0)
    assert distance_m(0, 0, lat2, 0, radius_m=1.0) == pytest.approx(math.radians(10.0), rel=1e-6)
