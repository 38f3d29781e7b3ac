"""安全解析結果のテキスト整形・集計・ファイル出力を扱うモジュール。"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Dict, Iterable, List

import pandas as pd

from .motion import SpeedViolation
from .proximity import CollisionEvent
from .errors import EC_STORAGE_IO, EC_STORAGE_PERM, AnalysisError

COLLISION_COLUMNS = ["agent_a", "agent_b", "time"]
SPEED_COLUMNS = ["agent_id", "time", "speed"]


def format_collision(event: CollisionEvent) -> str:
    return f"Drone {event.agent_a} and Drone {event.agent_b} at {event.time:.2f}s"


def format_speed_violation(violation: SpeedViolation) -> str:
    return f"Drone {violation.agent_id} at {violation.time:.2f}s ({violation.speed:.2f} m/s)"


def collisions_frame(events: Iterable[CollisionEvent]) -> pd.DataFrame:
    return pd.DataFrame([asdict(e) for e in events], columns=COLLISION_COLUMNS)


def speed_frame(violations: Iterable[SpeedViolation]) -> pd.DataFrame:
    return pd.DataFrame([asdict(v) for v in violations], columns=SPEED_COLUMNS)


def compute_summary(df_col: pd.DataFrame, df_speed: pd.DataFrame) -> Dict[str, object]:
    """衝突・速度超過テーブルから要約統計を計算する。

    Args:
        df_col: `collisions_frame` の出力。
        df_speed: `speed_frame` の出力。

    Returns:
        件数、最大速度、最多衝突ペアなどを格納した辞書。
    """
    summary: Dict[str, object] = {
        "collision_events": int(len(df_col)),
        "collision_pairs": 0,
        "busiest_pair": None,
        "first_collision_time": None,
        "speed_violations": int(len(df_speed)),
        "speeding_drones": 0,
        "max_speed": None,
        "max_speed_drone": None,
    }
    if not df_col.empty:
        per_pair = df_col.groupby(["agent_a", "agent_b"]).size().sort_values(ascending=False, kind="mergesort")
        a, b = per_pair.index[0]
        summary["collision_pairs"] = int(len(per_pair))
        summary["busiest_pair"] = (int(a), int(b), int(per_pair.iloc[0]))
        summary["first_collision_time"] = float(df_col["time"].min())
    if not df_speed.empty:
        idx = df_speed["speed"].idxmax()
        summary["speeding_drones"] = int(df_speed["agent_id"].nunique())
        summary["max_speed"] = float(df_speed.loc[idx, "speed"])
        summary["max_speed_drone"] = int(df_speed.loc[idx, "agent_id"])
    return summary


def summary_lines(summary: Dict[str, object], collision_lines: List[str], speed_lines: List[str]) -> List[str]:
    lines = [
        f"collision_events: {summary['collision_events']}",
        f"collision_pairs: {summary['collision_pairs']}",
    ]
    if summary["busiest_pair"] is not None:
        a, b, n = summary["busiest_pair"]
        lines.append(f"busiest_pair: Drone {a} and Drone {b} ({n} events)")
    lines.append(f"speed_violations: {summary['speed_violations']}")
    if summary["max_speed"] is not None:
        lines.append(f"max_speed: Drone {summary['max_speed_drone']} ({summary['max_speed']:.2f} m/s)")
    lines.append("")
    lines.append("[collisions]")
    lines.extend(collision_lines)
    lines.append("")
    lines.append("[speed warnings]")
    lines.extend(speed_lines)
    return lines


def save_table(df: pd.DataFrame, path: str) -> str:
    """DataFrame を CSV として保存する。

    Raises:
        AnalysisError: 書き込み権限不足・I/O失敗時。
    """
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        df.to_csv(out_path, index=False, encoding="utf-8")
        return str(out_path)
    except PermissionError as exc:
        raise AnalysisError(EC_STORAGE_PERM, f"permission denied: {out_path}") from exc
    except OSError as exc:
        raise AnalysisError(EC_STORAGE_IO, f"failed to save table: {exc}") from exc


def save_summary_txt(lines: List[str], path: str) -> str:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        out_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return str(out_path)
    except OSError as exc:
        raise AnalysisError(EC_STORAGE_IO, f"failed to save summary: {exc}") from exc
