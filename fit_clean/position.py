"""Position outlier removal by clustering coordinates into track-length buckets."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Iterable, Sequence

from fit_clean.errors import MissingSessionSummaryError
from fit_clean.geo import degrees_to_semicircles
from fit_clean.models import Message, SessionSummary, TrackPoint
from fit_clean.params import FilterParams

logger = logging.getLogger(__name__)


def session_total_distance_m(messages: Iterable[Message]) -> float:
    """Return the total distance of the first session summary that has one.

    Raises:
        MissingSessionSummaryError: If no session summary carries a total distance.
    """

    distances = [
        m.total_distance_m for m in messages if isinstance(m, SessionSummary) and m.total_distance_m is not None
    ]
    if not distances:
        raise MissingSessionSummaryError("找不到带 total_distance 的 session 消息，无法计算分段宽度")
    if len(distances) > 1:
        logger.warning("发现 %s 条 session 消息，使用第一条 total_distance=%s", len(distances), distances[0])
    return distances[0]


def segment_semicircles(total_distance_m: float, earth_circumference_m: float) -> int:
    """Angular span of one track length, in semicircles.

    The track's total distance is expressed as a fraction of Earth's circumference
    and converted to an angle. That angle is the bucket width used for clustering.
    """

    degrees = 360.0 * total_distance_m / earth_circumference_m
    return degrees_to_semicircles(degrees)


def modal_segment(values: Sequence[int], segment: int) -> int:
    """Index of the most populated bucket. Ties go to the lowest index."""

    counts = Counter(v // segment for v in values)
    return min(counts, key=lambda s: (-counts[s], s))


def find_outlier_values(values: Sequence[int], segment: int) -> set[int]:
    """Return the values lying more than one bucket away from the modal bucket.

    Args:
        values: Latitudes or longitudes in semicircles.
        segment: Bucket width in semicircles (> 0).

    Returns:
        The subset of values flagged as outliers.
    """

    if not values:
        return set()

    mode_value = segment * modal_segment(values, segment)
    return {v for v in values if abs(v - mode_value) > segment}


def filter_position_outliers(
    messages: Sequence[Message],
    params: FilterParams = FilterParams(),
) -> list[Message]:
    """Drop track points whose latitude or longitude falls outside the dominant cluster.

    Track points without a full position and all non-track messages are kept.

    Args:
        messages: Decoded messages of one track.
        params: Filter parameters (only the Earth circumference is used here).

    Returns:
        A new list without the position outliers.

    Raises:
        MissingSessionSummaryError: If the track has no session total distance.
    """

    total_distance_m = session_total_distance_m(messages)
    segment = segment_semicircles(total_distance_m, params.earth_circumference_m)
    if segment <= 0:
        logger.warning("total_distance=%s 太小，跳过位置异常点过滤", total_distance_m)
        return list(messages)

    positioned = [m.position for m in messages if isinstance(m, TrackPoint) and m.position is not None]
    lat_outliers = find_outlier_values([p.latitude for p in positioned], segment)
    lon_outliers = find_outlier_values([p.longitude for p in positioned], segment)
    logger.info(
        "分段宽度=%s semicircles（total_distance=%.1fm），纬度异常值=%s，经度异常值=%s",
        segment,
        total_distance_m,
        len(lat_outliers),
        len(lon_outliers),
    )

    def is_outlier(m: Message) -> bool:
        if not isinstance(m, TrackPoint) or m.position is None:
            return False
        return m.latitude in lat_outliers or m.longitude in lon_outliers

    return [m for m in messages if not is_outlier(m)]
