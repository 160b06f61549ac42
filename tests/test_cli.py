from __future__ import annotations

import json
from pathlib import Path

import pytest

import fit_clean.cli as cli
from fit_clean.geo import EARTH_CIRCUMFERENCE_M
from fit_clean.models import Message
from fit_clean.position import segment_semicircles

from conftest import mid_bucket, track, walk


@pytest.fixture
def fit_file(tmp_path: Path) -> Path:
    p = tmp_path / "ride.fit"
    p.write_bytes(b"")
    return p


@pytest.fixture
def written(monkeypatch: pytest.MonkeyPatch) -> dict[Path, list[Message]]:
    out: dict[Path, list[Message]] = {}
    monkeypatch.setattr(cli, "write_messages", lambda messages, path: out.__setitem__(Path(path), list(messages)))
    return out


def _stub_loader(monkeypatch: pytest.MonkeyPatch, messages: list[Message]) -> None:
    monkeypatch.setattr(cli, "load_messages", lambda path: messages)


def _clean_track() -> list[Message]:
    seg = segment_semicircles(1000.0, EARTH_CIRCUMFERENCE_M)
    return track(walk(0, mid_bucket(537_700_000, seg), mid_bucket(91_700_000, seg), 20), total_distance_m=1000.0)


def test_missing_argument_is_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code != 0
    assert "usage" in capsys.readouterr().err


def test_writes_sibling_file(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    fit_file: Path,
    written: dict[Path, list[Message]],
) -> None:
    messages = _clean_track()
    _stub_loader(monkeypatch, messages)

    assert cli.main([str(fit_file)]) == 0

    target = fit_file.with_name("ride-new.fit")
    assert written == {target: messages}
    assert f"Created file: {target}" in capsys.readouterr().out


def test_out_option_and_dry_run(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    fit_file: Path,
    written: dict[Path, list[Message]],
) -> None:
    _stub_loader(monkeypatch, _clean_track())

    assert cli.main([str(fit_file), "--dry-run"]) == 0
    assert written == {}

    assert cli.main([str(fit_file), "--out", str(tmp_path / "x.fit")]) == 0
    assert list(written) == [tmp_path / "x.fit"]


def test_fatal_filter_error_writes_nothing(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    fit_file: Path,
    written: dict[Path, list[Message]],
) -> None:
    _stub_loader(monkeypatch, walk(0, 537_700_000, 91_700_000, 5))

    assert cli.main([str(fit_file)]) == 1
    assert written == {}
    assert "session" in capsys.readouterr().err


def test_missing_input_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main([str(tmp_path / "missing.fit")]) == 1
    assert "missing.fit" in capsys.readouterr().err


def test_invalid_speed_limit(fit_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main([str(fit_file), "--speed-limit", "0"]) == 1
    assert "speed_limit_mps" in capsys.readouterr().err


def test_json_report(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    fit_file: Path,
    written: dict[Path, list[Message]],
) -> None:
    _stub_loader(monkeypatch, _clean_track())

    assert cli.main([str(fit_file), "--json", "--dry-run"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload["output"] is None
    assert payload["removed_by_position"] == 0
    assert payload["removed_by_speed"] == 0
    assert payload["before"]["positioned_points"] == 20
    assert payload["after"]["total_distance_m"] == 1000.0


def test_undecodable_file(tmp_path: Path, capsys: pytest.CaptureFixture[str], written: dict[Path, list[Message]]) -> None:
    bad = tmp_path / "bad.fit"
    bad.write_bytes(b"\x0e\x10this is not a fit file")

    assert cli.main([str(bad)]) == 1
    assert written == {}
    assert "Created file" not in capsys.readouterr().out
