"""Data models for decoded FIT messages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple, TypeAlias


class GeoPoint(NamedTuple):
    """A position in semicircles."""

    latitude: int
    longitude: int


@dataclass(frozen=True, slots=True)
class TrackPoint:
    """A single timestamped GPS sample (FIT ``record`` message).

    Attributes:
        timestamp: Unix epoch seconds.
        latitude: Latitude in semicircles, None when the device had no fix.
        longitude: Longitude in semicircles, None when the device had no fix.
        raw: The decoded message this point was read from; handed back to the encoder.
    """

    timestamp: int
    latitude: int | None
    longitude: int | None
    raw: Any = field(default=None, compare=False, repr=False)

    @property
    def position(self) -> GeoPoint | None:
        """Both coordinates, or None if either one is missing."""

        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class SessionSummary:
    """Per-track aggregates (FIT ``session`` message).

    Attributes:
        total_distance_m: Total distance in meters, None if the device did not record it.
        raw: The decoded message.
    """

    total_distance_m: float | None
    raw: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class OtherMessage:
    """Any message the filters do not look at. Passed through untouched."""

    raw: Any = field(default=None, compare=False, repr=False)
    name: str = "unknown"


Message: TypeAlias = TrackPoint | SessionSummary | OtherMessage
