"""FIT file input/output built on fit_tool.

Decoding and encoding are delegated to ``fit_tool``; this module only maps its
typed messages onto :mod:`fit_clean.models` and back.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

from fit_tool.definition_message import DefinitionMessage
from fit_tool.fit_file import FitFile
from fit_tool.fit_file_builder import FitFileBuilder
from fit_tool.profile.messages.record_message import RecordMessage
from fit_tool.profile.messages.session_message import SessionMessage

from fit_clean.errors import FitDecodeError
from fit_clean.geo import SEMICIRCLES_PER_HALF_TURN
from fit_clean.models import Message, OtherMessage, SessionSummary, TrackPoint

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = "-new"


def _to_semicircles(degrees: float | None) -> int | None:
    # fit_tool scales the stored integer to degrees; round to get that integer back.
    if degrees is None:
        return None
    return round(degrees * SEMICIRCLES_PER_HALF_TURN / 180.0)


def translate(message: Any) -> Message | None:
    """Classify one decoded fit_tool message.

    Returns:
        TrackPoint / SessionSummary / OtherMessage wrapping ``message``,
        or None for definition messages (the encoder regenerates those).
    """

    if isinstance(message, DefinitionMessage):
        return None
    if isinstance(message, RecordMessage):
        if message.timestamp is None:
            logger.warning("record 消息缺少 timestamp，按普通消息透传")
            return OtherMessage(raw=message, name="record")
        return TrackPoint(
            timestamp=int(message.timestamp) // 1000,
            latitude=_to_semicircles(message.position_lat),
            longitude=_to_semicircles(message.position_long),
            raw=message,
        )
    if isinstance(message, SessionMessage):
        return SessionSummary(total_distance_m=message.total_distance, raw=message)
    return OtherMessage(raw=message, name=str(getattr(message, "NAME", type(message).__name__)))


def translate_all(raw_messages: Iterable[Any]) -> list[Message]:
    """Translate decoded messages, dropping definition messages."""

    out: list[Message] = []
    for raw in raw_messages:
        m = translate(raw)
        if m is not None:
            out.append(m)
    return out


def load_messages(fit_path: str | Path) -> list[Message]:
    """Decode a FIT file into typed messages, in file order.

    Args:
        fit_path: Path to the .fit file.

    Raises:
        FileNotFoundError: If the file does not exist.
        FitDecodeError: If fit_tool cannot decode the file.
    """

    p = Path(fit_path)
    if not p.exists():
        raise FileNotFoundError(f"找不到文件：{fit_path}")
    try:
        fit_file = FitFile.from_file(str(p))
    except Exception as exc:  # fit_tool raises ValueError, struct.error, IndexError ... on corrupt input
        raise FitDecodeError(f"无法解码 FIT 文件：{p}（{exc}）") from exc
    messages = translate_all(record.message for record in fit_file.records)
    logger.info("已解码 %s 条数据消息：%s", len(messages), p)
    return messages


def write_messages(messages: Sequence[Message], out_path: str | Path) -> None:
    """Encode messages back into a FIT file using their original decoded objects."""

    builder = FitFileBuilder(auto_define=True, min_string_size=50)
    builder.add_all([m.raw for m in messages])
    builder.build().to_file(str(out_path))


def output_path_for(fit_path: str | Path) -> Path:
    """Sibling output path with ``-new`` inserted before the extension.

    Example:
        ride.fit -> ride-new.fit
    """

    p = Path(fit_path)
    return p.with_name(f"{p.stem}{OUTPUT_SUFFIX}{p.suffix}")
