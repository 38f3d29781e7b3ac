"""Structural checks for a flattened waypoint table."""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Iterable

import numpy as np
import pandas as pd

from .loader import TABLE_COLUMNS
from .errors import (
    EC_FRAME_ORDER,
    EC_FRAME_VALUE,
    EC_FRAMERATE,
    EC_INPUT_FORMAT,
    EC_POSITION,
    EC_TIMELINE_EMPTY,
    MalformedDatasetError,
)


def _check_columns(df: pd.DataFrame, required: Iterable[str]) -> None:
    if df is None or not isinstance(df, pd.DataFrame):
        raise MalformedDatasetError(EC_INPUT_FORMAT, "waypoint table is not a DataFrame")
    missing = set(required) - set(df.columns)
    if missing:
        raise MalformedDatasetError(EC_INPUT_FORMAT, f"missing required columns: {sorted(missing)}")


_FRAME_LIMIT = np.iinfo(np.int64).max


def _is_integral(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, Real):
        return False
    if not math.isfinite(float(value)) or not float(value).is_integer():
        return False
    # frames must fit in int64
    return abs(int(value)) <= _FRAME_LIMIT


def validate_framerate(framerate: Any) -> float:
    """Return the frame rate as a float.

    Raises:
        MalformedDatasetError: missing, non-numeric, non-finite or not positive.
    """
    if isinstance(framerate, bool) or not isinstance(framerate, Real):
        raise MalformedDatasetError(EC_FRAMERATE, "framerate must be a number")
    value = float(framerate)
    if not math.isfinite(value) or value <= 0:
        raise MalformedDatasetError(EC_FRAMERATE, f"framerate must be positive, got {framerate!r}")
    return value


def validate_waypoint_table(df: pd.DataFrame) -> pd.DataFrame:
    """Validate frames and coordinates and return a typed copy.

    Every agent listed in ``df.attrs["agent_ids"]`` (or present in the
    table) must own at least one waypoint, frames must be non-negative
    integers strictly increasing per agent in file order, and all
    coordinates must be finite numbers.

    Args:
        df: table produced by :func:`dronesafe.core.loader.to_waypoint_table`.

    Returns:
        Copy with ``frame`` as int64 and ``x``/``y``/``z`` as float64.

    Raises:
        MalformedDatasetError: on the first violated rule.
    """
    _check_columns(df, TABLE_COLUMNS)
    agent_ids = list(df.attrs.get("agent_ids", [])) or sorted(df["agent_id"].unique().tolist())
    if not agent_ids:
        raise MalformedDatasetError(EC_INPUT_FORMAT, "dataset has no drones")

    counts = df.groupby("agent_id").size()
    empty = [a for a in agent_ids if int(counts.get(a, 0)) == 0]
    if empty:
        raise MalformedDatasetError(EC_TIMELINE_EMPTY, f"drones without waypoints: {empty}")

    working = df.copy()

    raw_frames = working["frame"]
    non_int = ~raw_frames.map(_is_integral).astype(bool)
    if non_int.any():
        bad = working.loc[non_int, ["agent_id", "frame"]].iloc[0]
        raise MalformedDatasetError(
            EC_FRAME_VALUE, f"drone {int(bad['agent_id'])}: frame must be an integer, got {bad['frame']!r}"
        )
    working["frame"] = raw_frames.astype("int64")
    if (working["frame"] < 0).any():
        bad = working.loc[working["frame"] < 0].iloc[0]
        raise MalformedDatasetError(EC_FRAME_VALUE, f"drone {int(bad['agent_id'])}: negative frame {int(bad['frame'])}")

    for axis in ("x", "y", "z"):
        raw = working[axis]
        numeric = raw.map(lambda v: not isinstance(v, bool) and isinstance(v, Real))
        values = pd.to_numeric(raw.where(numeric), errors="coerce").astype("float64")
        invalid = ~np.isfinite(values.to_numpy())
        if invalid.any():
            agent = working["agent_id"].to_numpy()[invalid][0]
            raise MalformedDatasetError(EC_POSITION, f"drone {agent}: missing or non-numeric {axis} coordinate")
        working[axis] = values

    step = working.groupby("agent_id", sort=False)["frame"].diff()
    not_increasing = step.notna() & (step <= 0)
    if not_increasing.any():
        bad = working.loc[not_increasing].iloc[0]
        raise MalformedDatasetError(
            EC_FRAME_ORDER,
            f"drone {int(bad['agent_id'])}: frames must be strictly increasing (frame {int(bad['frame'])})",
        )
    return working
