"""Geospatial utilities for FIT semicircle coordinates (no external dependencies)."""

from __future__ import annotations

import math
from typing import Final

# FIT stores angles as signed 32-bit integers: +-2^31 maps to +-180 degrees.
SEMICIRCLES_PER_HALF_TURN: Final[int] = 2**31

EARTH_RADIUS_M: Final[float] = 6_371_000.0  # mean Earth radius in meters
EARTH_CIRCUMFERENCE_M: Final[float] = 40_075_000.0  # equatorial


def semicircles_to_degrees(value: int) -> float:
    """Convert a semicircle value to decimal degrees."""

    return value * (180.0 / SEMICIRCLES_PER_HALF_TURN)


def degrees_to_semicircles(value: float) -> int:
    """Convert decimal degrees to semicircles.

    The fractional part is truncated toward zero, so a degrees -> semicircles
    round trip may lose up to one unit.
    """

    return int(value * (SEMICIRCLES_PER_HALF_TURN / 180.0))


def haversine(theta: float) -> float:
    """Haversine of an angle in radians: sin(theta / 2) ** 2."""

    return math.sin(theta / 2.0) ** 2


def distance_m(
    lat1: int,
    lon1: int,
    lat2: int,
    lon2: int,
    radius_m: float = EARTH_RADIUS_M,
) -> float:
    """Compute great-circle distance in meters between two semicircle positions.

    Args:
        lat1: Latitude 1 in semicircles.
        lon1: Longitude 1 in semicircles.
        lat2: Latitude 2 in semicircles.
        lon2: Longitude 2 in semicircles.
        radius_m: Sphere radius in meters.

    Returns:
        Distance in meters.
    """

    phi1 = math.radians(semicircles_to_degrees(lat1))
    phi2 = math.radians(semicircles_to_degrees(lat2))
    lambda1 = math.radians(semicircles_to_degrees(lon1))
    lambda2 = math.radians(semicircles_to_degrees(lon2))

    a = haversine(phi2 - phi1) + math.cos(phi1) * math.cos(phi2) * haversine(lambda2 - lambda1)
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return radius_m * c
