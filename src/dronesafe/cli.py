# -*- coding: utf-8 -*-
"""
cli.py
Command line entry point: replay a waypoint dataset and write the safety report.

Usage:
  dronesafe replay data/waypoints.json
  dronesafe replay data/waypoints.json --max-speed 8 --collision-radius 0.5 --no-plot
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .core import AnalysisConfig, IOParams, ReplayParams, AnalysisError, load_config, run_replay


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="dronesafe", description="Drone trajectory replay and safety analysis")
    sub = ap.add_subparsers(dest="command", required=True)

    rp = sub.add_parser("replay", help="replay a dataset and export collisions/speed warnings")
    rp.add_argument("dataset", help="waypoint JSON file")
    rp.add_argument("--config", default=None, help="JSON file with analysis parameters")
    rp.add_argument("--scale", type=float, default=None, help="coordinate scale factor (default 0.01)")
    rp.add_argument("--collision-radius", type=float, default=None, help="[m] default 1.0")
    rp.add_argument("--max-speed", type=float, default=None, help="[m/s] default 5.0")
    rp.add_argument("--reference-agent", type=int, default=None, help="drone that defines playback length")
    rp.add_argument("--max-log-entries", type=int, default=None, help="cap each event log (default: unbounded)")
    rp.add_argument("--step", type=float, default=None, help="[s] tick spacing (default: one frame)")
    rp.add_argument("--start", type=float, default=0.0, help="[s] replay start time")
    rp.add_argument("--output-filename", default="replay")
    rp.add_argument("--no-plot", dest="plot", action="store_false", help="skip the trajectory PNG")
    rp.add_argument("--overwrite", action="store_true")
    rp.add_argument("--ver", default="v1")
    return ap


def _analysis_config(args: argparse.Namespace) -> AnalysisConfig:
    values = load_config(args.config).to_dict() if args.config else {}
    overrides = {
        "scale_factor": args.scale,
        "collision_radius": args.collision_radius,
        "max_speed": args.max_speed,
        "reference_agent": args.reference_agent,
        "max_log_entries": args.max_log_entries,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})
    return AnalysisConfig.from_dict(values)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = _analysis_config(args)
        results = run_replay(
            args.dataset,
            config=config,
            replay=ReplayParams(step=args.step, start_time=args.start),
            io=IOParams(output_filename=args.output_filename, overwrite=args.overwrite, plot=args.plot),
            ver=args.ver,
        )
    except AnalysisError as exc:
        print(f"EC={exc.code} {exc.message}", file=sys.stderr)
        return 1

    summary = results["summary"]
    print(f"collisions: {summary['collision_events']}  speed warnings: {summary['speed_violations']}")
    for key in ("collisions_csv", "speed_csv", "summary_txt", "traj_png", "log_path"):
        if results.get(key):
            print(f"{key}: {results[key]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
