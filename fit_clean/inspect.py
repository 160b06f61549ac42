"""Summaries of a decoded track, for before/after reporting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from fit_clean.geo import semicircles_to_degrees
from fit_clean.models import Message, SessionSummary, TrackPoint
from fit_clean.timeutils import DeltaStats, delta_stats


@dataclass(frozen=True, slots=True)
class TrackStats:
    """High-level track statistics."""

    messages: int
    track_points: int
    positioned_points: int
    duplicate_timestamps: int
    min_time_s: int | None
    max_time_s: int | None
    delta: DeltaStats | None
    min_lat: float | None
    max_lat: float | None
    min_lon: float | None
    max_lon: float | None
    total_distance_m: float | None


def inspect_messages(messages: Sequence[Message]) -> TrackStats:
    """Inspect already-decoded messages."""

    points = [m for m in messages if isinstance(m, TrackPoint)]
    positions = [p.position for p in points if p.position is not None]
    total_distance_m = next(
        (m.total_distance_m for m in messages if isinstance(m, SessionSummary) and m.total_distance_m is not None),
        None,
    )

    times = sorted(p.timestamp for p in points)
    dupe = sum(1 for i in range(1, len(times)) if times[i] == times[i - 1])

    lats = [semicircles_to_degrees(g.latitude) for g in positions]
    lons = [semicircles_to_degrees(g.longitude) for g in positions]
    return TrackStats(
        messages=len(messages),
        track_points=len(points),
        positioned_points=len(positions),
        duplicate_timestamps=dupe,
        min_time_s=times[0] if times else None,
        max_time_s=times[-1] if times else None,
        delta=delta_stats(times),
        min_lat=min(lats) if lats else None,
        max_lat=max(lats) if lats else None,
        min_lon=min(lons) if lons else None,
        max_lon=max(lons) if lons else None,
        total_distance_m=total_distance_m,
    )
