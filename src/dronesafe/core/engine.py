"""データセット読込から全区間リプレイ・解析結果出力までを統合する実行エンジン。"""

from __future__ import annotations

import math
import os
from datetime import datetime
from typing import Dict, List, Optional

from tqdm import tqdm

from .config import AnalysisConfig, IOParams, ReplayParams, save_config
from .loader import DatasetSource
from .logging_util import close_logger, get_logger, log_summary
from .naming import build_basename, meta_paths, result_path
from .playback import PlaybackSession
from .report import (
    collisions_frame,
    compute_summary,
    save_summary_txt,
    save_table,
    speed_frame,
    summary_lines,
)
from .errors import EC_CONFIG, EC_STORAGE_EXISTS, AnalysisError
from .timeline import TimelineStore
from .trajectory import TrajectoryPlotter


def replay_times(start: float, stop: float, step: float) -> List[float]:
    """``start`` から ``stop`` までを含む等間隔のティック時刻列を返す。"""
    if step <= 0 or not math.isfinite(step):
        raise AnalysisError(EC_CONFIG, "replay step must be a positive number")
    if stop < start:
        return []
    n = int(math.floor((stop - start) / step + 1e-9)) + 1
    return [start + i * step for i in range(n)]


class ReplayEngine:
    """データセットを読み込み、ティックごとにリプレイして安全レポートを書き出す。"""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        replay: Optional[ReplayParams] = None,
        io: Optional[IOParams] = None,
        ver: str = "v1",
    ) -> None:
        self.config = config or AnalysisConfig()
        self.replay = replay or ReplayParams()
        self.io = io or IOParams()
        self.ver = ver
        self.session: Optional[PlaybackSession] = None

    def _target(self, kind: str, prefix: str, basename: str) -> str:
        path = result_path(kind, prefix, basename)
        if not self.io.overwrite and os.path.exists(path):
            raise AnalysisError(EC_STORAGE_EXISTS, f"output already exists: {path}")
        return path

    def run(self, dataset: DatasetSource, dt: Optional[str] = None) -> Dict[str, object]:
        """データセットを全区間リプレイし、成果物の保存パスと統計を返す。

        Args:
            dataset: JSONファイルのパス、または読込済みの辞書。
            dt: 実行ID（命名用）。未指定なら現在時刻。

        Returns:
            成果物パス・ログパス・集計値を持つ辞書。

        Raises:
            AnalysisError: 読込・検証に失敗した場合、または出力先が既に存在する場合。
        """
        dt = dt or datetime.now().strftime("%Y%m%d_%H%M%S")
        mpaths = meta_paths(dt, self.ver)
        logger = get_logger(dt, mpaths["log_path"])
        try:
            return self._run(dataset, dt, mpaths, logger)
        finally:
            close_logger(logger)

    def _run(self, dataset, dt, mpaths, logger) -> Dict[str, object]:
        results: Dict[str, object] = {
            "collisions_csv": None,
            "speed_csv": None,
            "summary_txt": None,
            "traj_png": None,
            "log_path": mpaths["log_path"],
            "config_path": None,
        }
        try:
            store = TimelineStore.from_source(dataset, reference_agent=self.config.reference_agent)
        except AnalysisError as exc:
            logger.error("EC=%s dataset load failed: %s", exc.code, exc.message)
            raise
        logger.info(
            "dataset drones=%d framerate=%s max_time=%.3fs", len(store), store.frame_rate, store.max_time
        )

        basename = build_basename(self.io.output_filename, dt, self.ver)
        targets = {
            "collisions_csv": self._target("table", "collisions", basename),
            "speed_csv": self._target("table", "speed_violations", basename),
            "summary_txt": self._target("report", "summary", basename),
        }
        if self.io.plot:
            targets["traj_png"] = self._target("image", "traj", basename)

        session = PlaybackSession(store, self.config, logger=logger)
        self.session = session
        step = session.frame_period if self.replay.step is None else self.replay.step
        times = replay_times(session.seek(self.replay.start_time), store.max_time, step)
        logger.info("replay ticks=%d step=%.6fs", len(times), step)

        session.play()
        for t in tqdm(times, desc="Replay", unit="tick"):
            session.tick(t)
        session.pause()

        df_col = collisions_frame(session.collisions)
        df_speed = speed_frame(session.speed_violations)
        summary = compute_summary(df_col, df_speed)
        summary["ticks"] = len(times)
        summary["log_dropped"] = session.collisions.dropped + session.speed_violations.dropped

        try:
            results["collisions_csv"] = save_table(df_col, targets["collisions_csv"])
            results["speed_csv"] = save_table(df_speed, targets["speed_csv"])
            results["summary_txt"] = save_summary_txt(
                summary_lines(summary, session.collision_lines(), session.speed_lines()),
                targets["summary_txt"],
            )
        except AnalysisError as exc:
            logger.error("EC=%s report export failed: %s", exc.code, exc.message)

        if self.io.plot:
            plotter = TrajectoryPlotter(scale=self.config.scale_factor)
            try:
                fig = plotter.plot(store, session.collisions, session.speed_violations)
                results["traj_png"] = plotter.save_png(fig, targets["traj_png"])
            except AnalysisError as exc:
                logger.error("EC=%s trajectory render failed: %s", exc.code, exc.message)

        try:
            results["config_path"] = save_config(
                self.config, mpaths["config_path"], step=step, start_time=self.replay.start_time
            )
        except AnalysisError as exc:
            logger.warning("EC=%s save config failed: %s", exc.code, exc.message)

        results["summary"] = summary
        log_summary(logger, {k: v for k, v in results.items() if v and k != "summary"})
        log_summary(logger, summary)
        return results


def run_replay(
    dataset: DatasetSource,
    *,
    config: Optional[AnalysisConfig] = None,
    replay: Optional[ReplayParams] = None,
    io: Optional[IOParams] = None,
    ver: str = "v1",
) -> Dict[str, object]:
    return ReplayEngine(config=config, replay=replay, io=io, ver=ver).run(dataset)
