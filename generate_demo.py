# -*- coding: utf-8 -*-
"""
generate_demo.py
合成した飛行ログ（waypoints JSON）を生成し、リプレイ解析（衝突・速度超過）を実行するユーティリティ。

前提:
- プロジェクト構成:
  ./src/dronesafe/core/...
- 依存:
  pip install numpy pandas matplotlib tqdm

使い方（例）:
  python generate_demo.py
  python generate_demo.py --n-drones 8 --frames 600 --framerate 30 --max-speed 4 --overwrite
"""

from __future__ import annotations
import os
import sys
import json
import math
import logging
import argparse

import numpy as np

# --- src を import パスに追加 ---
ROOT = os.path.abspath(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from dronesafe.core import AnalysisConfig, IOParams, AnalysisError, run_replay

# --- ロガー ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(message)s"
)
logger = logging.getLogger("generate_demo")


def build_dataset(n_drones: int = 6, frames: int = 300, framerate: int = 30, every: int = 15) -> dict:
    """
    Circling drones on a shared ring, waypoints every ``every`` frames.
    Raw units are centimetres (scale 0.01 → metres) as in the recorded logs.
    - 隣接機は同じ円周を周回するため、半径が小さいと接近警告が出る
    """
    rng = np.random.default_rng(42)
    drones = []
    for i in range(n_drones):
        phase = 2 * math.pi * i / n_drones
        radius = 800.0 + rng.normal(0, 30)
        alt = 1000.0 + 150.0 * i
        waypoints = []
        for f in range(0, frames + 1, every):
            a = phase + 2 * math.pi * f / frames
            waypoints.append({
                "frame": f,
                "position": {
                    "lng_X": float(radius * math.cos(a)),
                    "alt_Y": float(alt + rng.normal(0, 5)),
                    "lat_Z": float(radius * math.sin(a)),
                },
            })
        drones.append({"waypoints": waypoints})
    return {"framerate": framerate, "drones": drones}


def ensure_output_roots(result_root: str, meta_root: str) -> None:
    """出力ルート（環境変数）を設定。"""
    os.makedirs(result_root, exist_ok=True)
    os.makedirs(meta_root, exist_ok=True)
    os.environ.setdefault("DRONESAFE_RESULT_ROOT", result_root)
    os.environ.setdefault("DRONESAFE_META_ROOT", meta_root)
    logger.info(f"RESULT_ROOT={os.environ['DRONESAFE_RESULT_ROOT']}")
    logger.info(f"META_ROOT={os.environ['DRONESAFE_META_ROOT']}")


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a synthetic waypoint dataset and replay it.")
    p.add_argument("--n-drones", type=int, default=6, help="ドローン数")
    p.add_argument("--frames", type=int, default=300, help="記録フレーム数")
    p.add_argument("--framerate", type=int, default=30, help="フレームレート")
    p.add_argument("--max-speed", type=float, default=5.0, help="速度上限 [m/s]")
    p.add_argument("--collision-radius", type=float, default=1.0, help="衝突半径 [m]")
    p.add_argument("--outfile", type=str, default="demo", help="出力ファイル名のベース")
    p.add_argument("--overwrite", action="store_true", help="既存ファイルがあっても上書きする")
    p.add_argument("--result-root", type=str, default=os.path.join(ROOT, "results"), help="成果物のルート出力先")
    p.add_argument("--meta-root", type=str, default=os.path.join(ROOT, "meta"), help="メタ(ログ等)のルート出力先")
    return p.parse_args()


def main():
    args = parse_args()
    ensure_output_roots(args.result_root, args.meta_root)

    dataset = build_dataset(n_drones=args.n_drones, frames=args.frames, framerate=args.framerate)
    data_path = os.path.join(args.result_root, f"{args.outfile}_waypoints.json")
    with open(data_path, "w", encoding="utf-8") as fh:
        json.dump(dataset, fh)
    logger.info(f"Generated dataset: drones={args.n_drones} frames={args.frames} path={data_path}")

    try:
        stats = run_replay(
            data_path,
            config=AnalysisConfig(max_speed=args.max_speed, collision_radius=args.collision_radius),
            io=IOParams(output_filename=args.outfile, overwrite=args.overwrite),
            ver="demo",
        )
    except AnalysisError as e:
        logger.error(f"[REPLAY] AnalysisError: EC={e.code} msg={e.message}")
        stats = {}

    print(stats)


if __name__ == "__main__":
    main()
