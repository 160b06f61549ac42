"""Speed outlier removal against the last accepted point."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from itertools import accumulate
from typing import Iterable, Sequence

from fit_clean.errors import SpeedNotRecoveringError
from fit_clean.geo import distance_m
from fit_clean.models import Message, TrackPoint
from fit_clean.params import FilterParams

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SpeedScanState:
    """Accumulator threaded through the speed scan.

    Attributes:
        anchor: Last accepted point; None until the first positioned point is seen.
        consecutive_rejections: Points rejected in a row against ``anchor``.
        rejected_index: Index of the point rejected by the step that produced this state.
        rejected: All rejected indices; only filled in on the state returned by :func:`scan_speed`.
    """

    anchor: TrackPoint | None = None
    consecutive_rejections: int = 0
    rejected_index: int | None = None
    rejected: frozenset[int] = frozenset()


def _step(state: SpeedScanState, item: tuple[int, TrackPoint], params: FilterParams) -> SpeedScanState:
    index, point = item
    anchor = state.anchor
    if anchor is None:
        return SpeedScanState(anchor=point)

    dt = point.timestamp - anchor.timestamp
    if dt == 0:
        logger.debug("时间差为0，跳过该点（timestamp=%s）", point.timestamp)
        return replace(state, rejected_index=None)

    dist = distance_m(
        anchor.latitude,
        anchor.longitude,
        point.latitude,
        point.longitude,
        radius_m=params.earth_radius_m,
    )
    speed = dist / dt
    if speed <= params.speed_limit_mps:
        return SpeedScanState(anchor=point)

    rejections = state.consecutive_rejections + 1
    logger.debug("速度异常：timestamp=%s speed=%.1fm/s（上限 %.1f）", point.timestamp, speed, params.speed_limit_mps)
    if rejections > params.max_consecutive_rejections:
        raise SpeedNotRecoveringError(
            f"连续 {rejections} 个点速度超过 {params.speed_limit_mps}m/s，"
            f"锚点 timestamp={anchor.timestamp} 可能本身不可靠",
            anchor=anchor,
            rejections=rejections,
        )
    return SpeedScanState(anchor=anchor, consecutive_rejections=rejections, rejected_index=index)


def scan_speed(
    indexed_points: Iterable[tuple[int, TrackPoint]],
    params: FilterParams = FilterParams(),
) -> SpeedScanState:
    """Fold the speed check over (index, point) pairs already sorted by timestamp.

    Returns:
        The final state, with ``rejected`` holding every rejected index.

    Raises:
        SpeedNotRecoveringError: If more than ``params.max_consecutive_rejections``
            points in a row exceed the speed limit.
    """

    rejected: set[int] = set()
    state = SpeedScanState()
    for state in accumulate(indexed_points, lambda s, item: _step(s, item, params), initial=state):
        if state.rejected_index is not None:
            rejected.add(state.rejected_index)
    return replace(state, rejected_index=None, rejected=frozenset(rejected))


def filter_speed_outliers(
    messages: Sequence[Message],
    params: FilterParams = FilterParams(),
) -> list[Message]:
    """Drop track points implying a speed above the limit.

    Speed is measured against the last accepted point, so one bad fix does not
    cause its good neighbours to be rejected. Points are scanned in timestamp
    order regardless of input order; the output keeps the input order.

    Args:
        messages: Decoded messages of one track.
        params: Filter parameters.

    Returns:
        A new list without the speed outliers.
    """

    indexed = [
        (i, m) for i, m in enumerate(messages) if isinstance(m, TrackPoint) and m.position is not None
    ]
    indexed.sort(key=lambda item: item[1].timestamp)

    state = scan_speed(indexed, params)
    if state.rejected:
        logger.info("速度异常点=%s（上限 %.1fm/s）", len(state.rejected), params.speed_limit_mps)
    return [m for i, m in enumerate(messages) if i not in state.rejected]
