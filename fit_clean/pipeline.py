"""Outlier removal pipeline: position filter first, then speed filter."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from fit_clean.models import Message, TrackPoint
from fit_clean.params import FilterParams
from fit_clean.position import filter_position_outliers
from fit_clean.speed import filter_speed_outliers

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CleanResult:
    """Cleaned messages plus what each stage removed."""

    messages: list[Message]
    removed_by_position: list[TrackPoint]
    removed_by_speed: list[TrackPoint]

    @property
    def removed_total(self) -> int:
        return len(self.removed_by_position) + len(self.removed_by_speed)


def _dropped(before: Sequence[Message], after: Sequence[Message]) -> list[TrackPoint]:
    kept = {id(m) for m in after}
    return [m for m in before if isinstance(m, TrackPoint) and id(m) not in kept]


def clean_track(messages: Sequence[Message], params: FilterParams = FilterParams()) -> CleanResult:
    """Run both filters and report what was removed.

    Position filtering must run first: the speed scan seeds its anchor from the
    first positioned point and assumes it is spatially sane.

    Raises:
        MissingSessionSummaryError: No session total distance.
        SpeedNotRecoveringError: The speed scan never recovered from an anchor.
    """

    after_position = filter_position_outliers(messages, params)
    after_speed = filter_speed_outliers(after_position, params)
    result = CleanResult(
        messages=after_speed,
        removed_by_position=_dropped(messages, after_position),
        removed_by_speed=_dropped(after_position, after_speed),
    )
    logger.info(
        "位置异常点移除=%s，速度异常点移除=%s，剩余消息=%s",
        len(result.removed_by_position),
        len(result.removed_by_speed),
        len(result.messages),
    )
    return result


def extract_bounds(messages: Sequence[Message], params: FilterParams = FilterParams()) -> list[Message]:
    """Return ``messages`` with position and speed outliers removed."""

    return clean_track(messages, params).messages
