"""Time helpers for the track report."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from zoneinfo import ZoneInfo


def tzinfo_from_name(tz_name: str) -> timezone:
    """Resolve the ``--tz`` option; unknown names raise ValueError."""

    try:
        return ZoneInfo(tz_name)
    except Exception as exc:  # ZoneInfo raises KeyError / ZoneInfoNotFoundError (platform dependent)
        raise ValueError(f"无效时区：{tz_name!r}。例如可用：UTC、Asia/Shanghai") from exc


def dt_from_epoch_s(epoch_s: int, tz_name: str) -> datetime:
    """FIT record timestamp (Unix seconds) as an aware datetime."""

    return datetime.fromtimestamp(epoch_s, tz=tzinfo_from_name(tz_name))


@dataclass(frozen=True, slots=True)
class DeltaStats:
    """Gaps between consecutive record timestamps, in seconds."""

    count: int
    min_s: float
    median_s: float
    p95_s: float
    max_s: float


def delta_stats(timestamps: Iterable[int]) -> DeltaStats | None:
    """Recording-interval stats over sorted record timestamps; None below two samples.

    Duplicate timestamps count as zero gaps.
    """

    ts = list(timestamps)
    gaps = sorted(float(b - a) for a, b in zip(ts, ts[1:]) if b >= a)
    if not gaps:
        return None
    n = len(gaps)
    median = gaps[n // 2] if n % 2 == 1 else 0.5 * (gaps[n // 2 - 1] + gaps[n // 2])
    return DeltaStats(
        count=n,
        min_s=gaps[0],
        median_s=median,
        p95_s=gaps[int(0.95 * (n - 1))],
        max_s=gaps[-1],
    )
