# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the orrery command-line interface."""
import json
import sys
from datetime import datetime, timezone

import pytest

from orrery.cli import main, run
from orrery.domain.config import SimulationConfig
from orrery.domain.messages import PositionVelocity
from orrery.domain.tracked_objects import TrackedObjectRecord

ISS_LINE1 = "1 25544U 98067A   08264.51782528 -.00002182  00000-0 -11606-4 0  2927"
ISS_LINE2 = "2 25544  51.6416 247.4627 0006703 130.5360 325.0288 15.72125391563537"


class _FakePropagator:
    def propagate(self, line1, line2, when):
        return PositionVelocity((7000.0, 0.0, 0.0), (0.0, 7.5, 0.0))

    def orbital_period_s(self, line1, line2):
        return 5400.0


def _records(n: int):
    return [TrackedObjectRecord(i, f"SAT-{i}", f"1 {i}", f"2 {i}") for i in range(n)]


def _write_tle(tmp_path) -> str:
    path = tmp_path / "iss.tle"
    path.write_text(f"ISS (ZARYA)\n{ISS_LINE1}\n{ISS_LINE2}\n", encoding="utf-8")
    return str(path)


# ── run() ─────────────────────────────────────────────────────────

class TestRun:

    def test_threaded_run_loads_everything(self):
        snapshot = run(
            _records(1200),
            config=SimulationConfig(worker_threads=3),
            start_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
            propagator=_FakePropagator(),
        )
        assert snapshot["objects"]["valid"] == 1200
        assert snapshot["time"] == "2024-01-01T00:00:00Z"

    def test_steps_advance_time(self):
        snapshot = run(
            _records(3),
            start_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
            steps=5,
            sequential=True,
            propagator=_FakePropagator(),
        )
        assert snapshot["time"] == "2024-01-01T00:05:00Z"

    def test_focus_and_trajectory(self):
        snapshot = run(
            _records(3),
            config=SimulationConfig(trajectory_sample_count=25),
            start_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
            focus="moon",
            trajectory_index=1,
            sequential=True,
            propagator=_FakePropagator(),
        )
        assert snapshot["focus"] == "moon"
        assert snapshot["bodies"]["moon"] == pytest.approx([0.0, 0.0, 0.0], abs=1e-9)
        assert len(snapshot["trajectories"]["selected"]) == 25


# ── main() ────────────────────────────────────────────────────────

class TestMain:

    def test_missing_tle_file(self, tmp_path, capsys, monkeypatch):
        missing = str(tmp_path / "missing.tle")
        monkeypatch.setattr(sys, 'argv', ['orrery', '--tle', missing])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "not found" in capsys.readouterr().err.lower()

    def test_source_required(self, monkeypatch):
        monkeypatch.setattr(sys, 'argv', ['orrery'])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 2

    def test_bad_time(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setattr(sys, 'argv', ['orrery', '--tle', _write_tle(tmp_path), '--time', 'soon'])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "Error" in capsys.readouterr().err

    def test_bad_config(self, tmp_path, capsys, monkeypatch):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"batch_size": 0}))
        monkeypatch.setattr(sys, 'argv', ['orrery', '--tle', _write_tle(tmp_path), '--config', str(config)])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "batch_size" in capsys.readouterr().err

    def test_unknown_focus(self, tmp_path, capsys, monkeypatch):
        pytest.importorskip("sgp4", reason="sgp4 not installed (pip install orrery)")
        monkeypatch.setattr(sys, 'argv', [
            'orrery', '--tle', _write_tle(tmp_path), '--focus', 'vulcan', '--sequential',
        ])
        with pytest.raises(SystemExit) as exc_info:
            main()
        assert exc_info.value.code == 1
        assert "vulcan" in capsys.readouterr().err

    def test_end_to_end_snapshot(self, tmp_path, capsys, monkeypatch):
        pytest.importorskip("sgp4", reason="sgp4 not installed (pip install orrery)")
        output = tmp_path / "snapshot.json"
        monkeypatch.setattr(sys, 'argv', [
            'orrery', '--tle', _write_tle(tmp_path),
            '--time', '2008-09-20T12:25:40Z',
            '--trajectory', '0',
            '--output', str(output),
        ])
        main()
        out = capsys.readouterr().out
        assert "Objects positioned: 1/1" in out
        snapshot = json.loads(output.read_text(encoding="utf-8"))
        assert snapshot["focus"] == "earth"
        assert snapshot["objects"]["valid"] == 1
        assert len(snapshot["trajectories"]["selected"]) == 100
        x, y, z = snapshot["objects"]["positions"][0]
        distance_earth_radii = (x * x + y * y + z * z) ** 0.5
        assert 1.03 < distance_earth_radii < 1.07
