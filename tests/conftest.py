"""Shared builders for synthetic tracks."""

from __future__ import annotations

import pytest

from fit_clean.geo import degrees_to_semicircles
from fit_clean.models import Message, OtherMessage, SessionSummary, TrackPoint
from fit_clean.params import FilterParams

# ~1 m of latitude, in semicircles
SEMICIRCLES_PER_METER = 107


def point(t: int, lat_deg: float, lon_deg: float) -> TrackPoint:
    """Track point from degrees."""
    return TrackPoint(timestamp=t, latitude=degrees_to_semicircles(lat_deg), longitude=degrees_to_semicircles(lon_deg))


def walk(start_t: int, lat: int, lon: int, count: int, step: int = SEMICIRCLES_PER_METER) -> list[TrackPoint]:
    """``count`` points at 1 s intervals moving ``step`` semicircles north each second."""
    return [TrackPoint(timestamp=start_t + i, latitude=lat + i * step, longitude=lon) for i in range(count)]


def track(points: list[Message], total_distance_m: float | None = 1000.0) -> list[Message]:
    """Wrap points with the surrounding messages a real file has."""
    return [
        OtherMessage(name="file_id"),
        *points,
        SessionSummary(total_distance_m=total_distance_m),
        OtherMessage(name="activity"),
    ]


@pytest.fixture
def params() -> FilterParams:
    return FilterParams()


@pytest.fixture
def turin() -> tuple[int, int]:
    """A starting position in semicircles (lat, lon)."""
    return degrees_to_semicircles(45.07), degrees_to_semicircles(7.69)


def mid_bucket(value: int, segment: int) -> int:
    """Move ``value`` to the middle of its bucket so a small cluster never straddles a bucket edge."""
    return (value // segment) * segment + segment // 2
