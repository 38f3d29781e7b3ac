from __future__ import annotations

from pathlib import Path

from dronesafe.core.logging_util import close_logger, get_logger, log_summary
from dronesafe.core.naming import build_basename, meta_paths, result_path


def test_logger_writes_to_file(tmp_path):
    log_path = tmp_path / "meta" / "logs" / "run_x.log"
    logger = get_logger("x", str(log_path))
    log_summary(logger, {"collision_events": 3})
    close_logger(logger)
    assert "collision_events" in log_path.read_text(encoding="utf-8")
    assert logger.handlers == []


def test_output_paths_follow_environment(tmp_path):
    basename = build_basename("my run", "20250101_000000", "v1")
    assert basename == "my-run-20250101_000000_v1"
    path = result_path("table", "collisions", basename)
    assert path == str(tmp_path / "results" / "tables" / f"collisions-{basename}.csv")
    assert Path(path).parent.is_dir()
    paths = meta_paths("20250101_000000", "v1")
    assert paths["log_path"] == str(tmp_path / "meta" / "logs" / "run_20250101_000000.log")
