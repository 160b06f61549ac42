from __future__ import annotations

import tempfile
from pathlib import Path

import streamlit as st

from fit_clean.errors import FitDecodeError, TrackCleanError
from fit_clean.fit_io import load_messages, output_path_for, write_messages
from fit_clean.geo import semicircles_to_degrees
from fit_clean.inspect import inspect_messages
from fit_clean.models import Message, TrackPoint
from fit_clean.params import FilterParams
from fit_clean.pipeline import clean_track


def _map_rows(messages: list[Message]) -> dict[str, list[float]]:
    lats: list[float] = []
    lons: list[float] = []
    for m in messages:
        if isinstance(m, TrackPoint) and m.position is not None:
            lats.append(semicircles_to_degrees(m.position.latitude))
            lons.append(semicircles_to_degrees(m.position.longitude))
    return {"lat": lats, "lon": lons}


def _decode(data: bytes) -> list[Message]:
    with tempfile.TemporaryDirectory() as tmp:
        p = Path(tmp) / "upload.fit"
        p.write_bytes(data)
        return load_messages(p)


def _encode(messages: list[Message], file_name: str) -> bytes:
    with tempfile.TemporaryDirectory() as tmp:
        p = output_path_for(Path(tmp) / file_name)
        write_messages(messages, p)
        return p.read_bytes()


def main() -> None:
    st.set_page_config(page_title="FIT 轨迹异常点清洗", layout="wide")
    st.title("FIT 轨迹异常点清洗")

    defaults = FilterParams()
    with st.sidebar:
        st.subheader("参数")
        speed_limit = st.number_input("速度上限（m/s）", value=defaults.speed_limit_mps, min_value=0.1, step=1.0)
        max_rejections = st.number_input(
            "连续超速点数上限", value=defaults.max_consecutive_rejections, min_value=0, step=1
        )
        uploaded = st.file_uploader("上传 .fit 文件", type=["fit"])

    if uploaded is None:
        st.info("请在左侧上传 .fit 文件。")
        return

    try:
        with st.spinner("正在解码 ..."):
            messages = _decode(uploaded.getvalue())
    except FitDecodeError as exc:
        st.error(str(exc))
        return
    except Exception as exc:
        st.exception(exc)
        return

    params = FilterParams(speed_limit_mps=float(speed_limit), max_consecutive_rejections=int(max_rejections))
    try:
        result = clean_track(messages, params)
    except TrackCleanError as exc:
        st.error(f"清洗失败：{exc}")
        return

    before = inspect_messages(messages)
    after = inspect_messages(result.messages)

    st.subheader("汇总")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("有位置的点（清洗前）", str(before.positioned_points))
    c2.metric("有位置的点（清洗后）", str(after.positioned_points))
    c3.metric("位置异常点", str(len(result.removed_by_position)))
    c4.metric("速度异常点", str(len(result.removed_by_speed)))
    if before.total_distance_m is not None:
        st.caption(f"session total_distance = {before.total_distance_m:.1f} m")

    st.subheader("清洗后轨迹")
    st.map(_map_rows(result.messages))

    removed = [("position", p) for p in result.removed_by_position] + [
        ("speed", p) for p in result.removed_by_speed
    ]
    if removed:
        with st.expander("被移除的点", expanded=False):
            rows = [
                {
                    "timestamp": p.timestamp,
                    "lat": semicircles_to_degrees(p.latitude) if p.latitude is not None else None,
                    "lon": semicircles_to_degrees(p.longitude) if p.longitude is not None else None,
                    "stage": stage,
                }
                for stage, p in removed
            ]
            st.dataframe(rows, use_container_width=True)

    st.download_button(
        "下载清洗后的 .fit",
        data=_encode(result.messages, uploaded.name),
        file_name=output_path_for(uploaded.name).name,
        mime="application/octet-stream",
    )


if __name__ == "__main__":
    main()
