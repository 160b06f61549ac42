"""Command-line interface for fit_clean.

Run:
    python -m fit_clean activity.fit
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

from fit_clean.errors import FitDecodeError, TrackCleanError
from fit_clean.fit_io import load_messages, output_path_for, write_messages
from fit_clean.inspect import TrackStats, inspect_messages
from fit_clean.params import FilterParams
from fit_clean.pipeline import clean_track
from fit_clean.timeutils import dt_from_epoch_s

DEFAULT_TZ = "UTC"


def _print_stats(title: str, stats: TrackStats, tz_name: str) -> None:
    print(f"### {title}")
    print(
        f"messages={stats.messages}, track_points={stats.track_points}, "
        f"positioned={stats.positioned_points}, duplicate_timestamps={stats.duplicate_timestamps}"
    )
    if stats.min_time_s is not None and stats.max_time_s is not None:
        start = dt_from_epoch_s(stats.min_time_s, tz_name)
        end = dt_from_epoch_s(stats.max_time_s, tz_name)
        print(f"start={start.isoformat(sep=' ')}, end={end.isoformat(sep=' ')}")
    if stats.delta is not None:
        print(
            f"采样间隔（秒）：min={stats.delta.min_s:.0f}, median={stats.delta.median_s:.1f}, "
            f"p95={stats.delta.p95_s:.0f}, max={stats.delta.max_s:.0f}"
        )
    print(f"lat=[{stats.min_lat}, {stats.max_lat}], lon=[{stats.min_lon}, {stats.max_lon}]")
    print()


def _cmd_clean(args: argparse.Namespace) -> int:
    fit_path = Path(args.fit_file)
    params = FilterParams(
        speed_limit_mps=args.speed_limit,
        max_consecutive_rejections=args.max_rejections,
    )

    if not args.json:
        print(f"正在解码 {fit_path} ...")
    try:
        messages = load_messages(fit_path)
    except (FileNotFoundError, FitDecodeError) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    before = inspect_messages(messages)
    try:
        result = clean_track(messages, params)
    except TrackCleanError as exc:
        print(f"清洗失败：{exc}", file=sys.stderr)
        return 1
    after = inspect_messages(result.messages)
    out_path = None if args.dry_run else (Path(args.out) if args.out else output_path_for(fit_path))

    if args.json:
        payload = {
            "input": str(fit_path),
            "output": None if out_path is None else str(out_path),
            "removed_by_position": len(result.removed_by_position),
            "removed_by_speed": len(result.removed_by_speed),
            "before": asdict(before),
            "after": asdict(after),
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        _print_stats("清洗前", before, args.tz)
        _print_stats("清洗后", after, args.tz)
        print(f"位置异常点={len(result.removed_by_position)}，速度异常点={len(result.removed_by_speed)}")

    if out_path is None:
        if not args.json:
            print("dry-run：未写出文件")
        return 0

    write_messages(result.messages, out_path)
    if not args.json:
        print(f"Created file: {out_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""

    defaults = FilterParams()
    p = argparse.ArgumentParser(prog="fit_clean", description="移除 FIT 轨迹中的位置/速度异常点")
    p.add_argument("fit_file", type=str, help="输入 .fit 文件路径")
    p.add_argument("--out", type=str, default=None, help="输出路径（默认：同目录下 <name>-new.fit）")
    p.add_argument(
        "--speed-limit",
        type=float,
        default=defaults.speed_limit_mps,
        help="速度上限（m/s），相对上一个被接受的点计算",
    )
    p.add_argument(
        "--max-rejections",
        type=int,
        default=defaults.max_consecutive_rejections,
        help="连续超速点数上限，超过则认为锚点不可靠并中止",
    )
    p.add_argument("--tz", type=str, default=DEFAULT_TZ, help="报告中显示时间用的时区（IANA）")
    p.add_argument("--dry-run", action="store_true", help="只分析不写文件")
    p.add_argument("--json", action="store_true", help="以JSON输出统计（便于后处理）")
    p.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    p.set_defaults(func=_cmd_clean)
    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""

    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        return int(args.func(args))
    except ValueError as exc:
        # 参数非法（例如速度上限<=0）或 --tz 时区无效；解码失败已在 _cmd_clean 中处理
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
