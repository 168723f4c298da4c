from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from aurora_field import cli
from aurora_field.config import clear_config_cache

PAYLOAD = {
    "Observation Time": "2024-05-10T21:00:00Z",
    "Forecast Time": "2024-05-10T21:45:00Z",
    "Data Format": "[Longitude, Latitude, Aurora]",
    "coordinates": [
        [350, 65, 42],
        [10, 55, 60],
        [200, 70, 90],
        [100, -62, 55],
        [120, -75, 2],
    ],
}


@pytest.fixture
def feed_file(tmp_path: Path) -> Path:
    path = tmp_path / "ovation.json"
    path.write_text(json.dumps(PAYLOAD), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_config_cache():
    clear_config_cache()
    yield
    clear_config_cache()


def test_summary_command(feed_file: Path, capsys: pytest.CaptureFixture) -> None:
    assert cli.main(["summary", "--feed", str(feed_file)]) == 0
    out = capsys.readouterr().out
    assert "Northern: 3 samples, max 90%" in out
    assert "visible (>= 50%) down to 55 deg" in out
    assert "Southern: 1 samples, max 55%" in out


def test_export_command(feed_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "field.csv"
    assert cli.main(["export", "--feed", str(feed_file), "--out", str(out), "--target-count", "2"]) == 0
    frame = pd.read_csv(out)
    assert (frame["hemisphere"] == "Northern").sum() == 2
    assert (frame["hemisphere"] == "Southern").sum() == 1


def test_render_command(feed_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    out = tmp_path / "south.png"
    code = cli.main(
        [
            "render",
            "--feed",
            str(feed_file),
            "--out",
            str(out),
            "--hemisphere",
            "south",
            "--width",
            "400",
            "--height",
            "200",
            "--no-boost",
        ]
    )
    assert code == 0
    assert out.exists()
    assert "southern hemisphere" in capsys.readouterr().out


def test_feed_error_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    missing = tmp_path / "missing.json"
    assert cli.main(["summary", "--feed", str(missing)]) == 1
    assert "error:" in capsys.readouterr().err


def test_no_command_prints_help(capsys: pytest.CaptureFixture) -> None:
    assert cli.main([]) == 0
    assert "render" in capsys.readouterr().out
