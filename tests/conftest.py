# tests/conftest.py
import json
import os
import sys

import pytest

# プロジェクトの src/ を import パスへ
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)


@pytest.fixture(autouse=True)
def patch_output_dirs(monkeypatch, tmp_path):
    """
    Send every artefact of a test to its own temporary directory.
    """
    monkeypatch.setenv("DRONESAFE_RESULT_ROOT", str(tmp_path / "results"))
    monkeypatch.setenv("DRONESAFE_META_ROOT", str(tmp_path / "meta"))


def waypoint(frame, x, y=0.0, z=0.0):
    return {"frame": frame, "position": {"lng_X": x, "alt_Y": y, "lat_Z": z}}


@pytest.fixture
def make_dataset():
    """
    Build a dataset dict from ``{drone: [(frame, x, y, z), ...]}`` style lists.
    """
    def _make(tracks, framerate=10):
        return {
            "framerate": framerate,
            "drones": [{"waypoints": [waypoint(*wp) for wp in track]} for track in tracks],
        }
    return _make


@pytest.fixture
def crossing_dataset(make_dataset):
    """
    Two drones flying towards each other along x at 100 raw units/frame-span,
    meeting at frame 10, plus a third one parked far away.
    Scale 0.01 → drone 0 moves 0 → 2 m, drone 1 moves 2 → 0 m over 2 s.
    """
    return make_dataset([
        [(0, 0.0), (20, 200.0)],
        [(0, 200.0), (20, 0.0)],
        [(0, 5000.0, 0.0, 5000.0), (20, 5000.0, 0.0, 5000.0)],
    ])


@pytest.fixture
def write_json(tmp_path):
    def _write(payload, name="waypoints.json"):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path
    return _write
