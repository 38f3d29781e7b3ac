from __future__ import annotations

import json

import pytest

from dronesafe.core.config import AnalysisConfig, load_config, save_config
from dronesafe.core.errors import AnalysisError


def test_defaults():
    cfg = AnalysisConfig()
    assert cfg.scale_factor == 0.01
    assert cfg.collision_radius == 1.0
    assert cfg.max_speed == 5.0
    assert cfg.max_log_entries is None


def test_from_dict_ignores_unknown_keys():
    cfg = AnalysisConfig.from_dict({"max_speed": 8, "camera": "orbit"})
    assert cfg.max_speed == 8


@pytest.mark.parametrize(
    "values",
    [
        {"scale_factor": 0},
        {"collision_radius": -1},
        {"max_speed": float("nan")},
        {"max_speed": "fast"},
        {"max_log_entries": 0},
        {"reference_agent": -1},
        {"reference_agent": "0"},
        {"reference_agent": 1.0},
        {"reference_agent": True},
        {"max_log_entries": "3"},
        {"max_log_entries": 2.5},
        {"max_log_entries": True},
    ],
)
def test_invalid_values_are_rejected(values):
    with pytest.raises(AnalysisError) as ei:
        AnalysisConfig.from_dict(values)
    assert ei.value.code == -2104


def test_load_config_file(tmp_path):
    path = tmp_path / "params.json"
    path.write_text(json.dumps({"collision_radius": 0.5}), encoding="utf-8")
    assert load_config(str(path)).collision_radius == 0.5


def test_save_config_writes_extra_fields(tmp_path):
    path = save_config(AnalysisConfig(), str(tmp_path / "meta" / "run.json"), step=0.1)
    payload = json.loads(open(path, encoding="utf-8").read())
    assert payload["step"] == 0.1
    assert payload["max_speed"] == 5.0
