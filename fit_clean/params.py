"""Filter thresholds."""

from __future__ import annotations

from dataclasses import dataclass

from fit_clean.geo import EARTH_CIRCUMFERENCE_M, EARTH_RADIUS_M


@dataclass(frozen=True, slots=True)
class FilterParams:
    """Parameters controlling outlier removal."""

    # Anything faster than this relative to the last accepted point is dropped.
    speed_limit_mps: float = 30.0
    # Abort once more than this many points in a row were rejected against one anchor.
    max_consecutive_rejections: int = 10
    earth_radius_m: float = EARTH_RADIUS_M
    earth_circumference_m: float = EARTH_CIRCUMFERENCE_M

    def __post_init__(self) -> None:
        if self.speed_limit_mps <= 0:
            raise ValueError(f"speed_limit_mps 必须为正数：{self.speed_limit_mps!r}")
        if self.max_consecutive_rejections < 0:
            raise ValueError(f"max_consecutive_rejections 不能为负数：{self.max_consecutive_rejections!r}")
        if self.earth_radius_m <= 0 or self.earth_circumference_m <= 0:
            raise ValueError("地球半径/周长必须为正数")
