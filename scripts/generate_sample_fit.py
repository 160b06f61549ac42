from __future__ import annotations

import argparse
import math
import random
from datetime import datetime, timezone
from pathlib import Path

from fit_tool.fit_file_builder import FitFileBuilder
from fit_tool.profile.messages.file_id_message import FileIdMessage
from fit_tool.profile.messages.record_message import RecordMessage
from fit_tool.profile.messages.session_message import SessionMessage
from fit_tool.profile.profile_type import FileType, Manufacturer, Sport

# Mean Earth radius; one degree of latitude is ~111.2 km.
M_PER_DEG_LAT = 6_371_000.0 * math.pi / 180.0


def generate_records(
    *,
    points: int,
    seed: int,
    start_ms: int,
    start_lat: float,
    start_lon: float,
    speed_mps: float,
    glitch_every: int,
) -> tuple[list[RecordMessage], float]:
    """Generate 1 Hz records along a wandering path, with injected GPS glitches.

    Every ``glitch_every``-th point is either teleported far away (position outlier)
    or displaced a few km (speed outlier).

    Returns:
        (records, total distance in meters of the clean path)
    """

    rng = random.Random(seed)
    lat, lon = start_lat, start_lon
    heading = rng.uniform(0, 2 * math.pi)
    total_m = 0.0
    out: list[RecordMessage] = []

    for i in range(points):
        heading += rng.uniform(-0.2, 0.2)
        step = speed_mps * rng.uniform(0.7, 1.3)
        lat += step * math.cos(heading) / M_PER_DEG_LAT
        lon += step * math.sin(heading) / (M_PER_DEG_LAT * math.cos(math.radians(lat)))
        total_m += step

        rec_lat, rec_lon = lat, lon
        if glitch_every > 0 and i > 0 and i % glitch_every == 0:
            if rng.random() < 0.5:
                # opposite side of the globe
                rec_lat, rec_lon = -lat, lon - 180.0 if lon > 0 else lon + 180.0
            else:
                rec_lat += rng.uniform(0.02, 0.05)

        rec = RecordMessage()
        rec.timestamp = start_ms + i * 1000
        rec.position_lat = rec_lat
        rec.position_long = rec_lon
        rec.distance = total_m
        out.append(rec)

    return out, total_m


def main() -> int:
    p = argparse.ArgumentParser(description="Generate a synthetic .fit track with GPS glitches for demo/testing.")
    p.add_argument("--out", type=str, default="sample_data/sample.fit", help="Output FIT path")
    p.add_argument("--points", type=int, default=1800, help="Number of 1 Hz records")
    p.add_argument("--seed", type=int, default=42, help="Random seed (reproducible)")
    p.add_argument("--speed", type=float, default=4.0, help="Mean speed in m/s")
    p.add_argument("--glitch-every", type=int, default=97, help="Inject a glitch every N points (0 = none)")
    p.add_argument("--start", type=str, default="2025-01-01 08:00:00", help="Start time (UTC)")
    args = p.parse_args()

    start = datetime.fromisoformat(args.start).replace(tzinfo=timezone.utc)
    start_ms = int(start.timestamp() * 1000)

    records, total_m = generate_records(
        points=args.points,
        seed=args.seed,
        start_ms=start_ms,
        start_lat=45.0703,
        start_lon=7.6869,
        speed_mps=args.speed,
        glitch_every=args.glitch_every,
    )

    file_id = FileIdMessage()
    file_id.type = FileType.ACTIVITY
    file_id.manufacturer = Manufacturer.DEVELOPMENT.value
    file_id.product = 0
    file_id.time_created = start_ms
    file_id.serial_number = 0x12345678

    session = SessionMessage()
    session.timestamp = records[-1].timestamp
    session.start_time = start_ms
    session.total_elapsed_time = float(args.points)
    session.total_timer_time = float(args.points)
    session.total_distance = total_m
    session.sport = Sport.RUNNING

    builder = FitFileBuilder(auto_define=True, min_string_size=50)
    builder.add(file_id)
    builder.add_all(records)
    builder.add(session)

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    builder.build().to_file(str(out_path))

    print(f"Generated: {out_path} (points={len(records)}, distance={total_m:.0f}m, seed={args.seed})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
