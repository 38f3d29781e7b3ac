"""Read a waypoint dataset (JSON) into a flat per-waypoint table."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Tuple, Union

import pandas as pd

from .errors import (
    EC_INPUT_FORMAT,
    EC_INPUT_TYPE,
    EC_STORAGE_IO,
    EC_STORAGE_MISSING,
    EC_STORAGE_PERM,
    DatasetIOError,
    MalformedDatasetError,
)

# JSON key → axis
POSITION_FIELDS = {"lng_X": "x", "alt_Y": "y", "lat_Z": "z"}
TABLE_COLUMNS = ("agent_id", "frame", "x", "y", "z")

DatasetSource = Union[str, Path, Mapping[str, Any]]


def read_json(path: Union[str, Path]) -> Any:
    """Parse a dataset file.

    Raises:
        DatasetIOError: the file is missing, unreadable or not valid JSON.
    """
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as exc:
        raise DatasetIOError(EC_STORAGE_MISSING, f"dataset not found: {p}") from exc
    except PermissionError as exc:
        raise DatasetIOError(EC_STORAGE_PERM, f"dataset not readable: {p}") from exc
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DatasetIOError(EC_STORAGE_IO, f"failed to read dataset {p}: {exc}") from exc


def _waypoint_row(agent_id: int, waypoint: Any) -> dict:
    if not isinstance(waypoint, Mapping):
        raise MalformedDatasetError(EC_INPUT_FORMAT, f"drone {agent_id}: waypoint is not an object")
    if "frame" not in waypoint or "position" not in waypoint:
        raise MalformedDatasetError(EC_INPUT_FORMAT, f"drone {agent_id}: waypoint needs 'frame' and 'position'")
    position = waypoint["position"]
    if not isinstance(position, Mapping):
        raise MalformedDatasetError(EC_INPUT_FORMAT, f"drone {agent_id}: position is not an object")
    row = {"agent_id": agent_id, "frame": waypoint["frame"]}
    for key, axis in POSITION_FIELDS.items():
        # missing keys stay None; validation rejects them
        row[axis] = position.get(key)
    return row


def to_waypoint_table(dataset: Any) -> Tuple[Any, pd.DataFrame]:
    """Flatten a parsed dataset into `(framerate, table)`.

    The table has one row per waypoint with columns
    ``agent_id, frame, x, y, z`` in file order. Values are not checked
    beyond the document shape; see :mod:`dronesafe.core.validation`.

    Raises:
        MalformedDatasetError: the document does not have the expected shape.
    """
    if not isinstance(dataset, Mapping):
        raise MalformedDatasetError(EC_INPUT_TYPE, "dataset must be a JSON object")
    missing = [k for k in ("framerate", "drones") if k not in dataset]
    if missing:
        raise MalformedDatasetError(EC_INPUT_FORMAT, f"missing required fields: {sorted(missing)}")
    drones = dataset["drones"]
    if not isinstance(drones, list):
        raise MalformedDatasetError(EC_INPUT_FORMAT, "'drones' must be a list")

    rows = []
    agent_ids = []
    for agent_id, drone in enumerate(drones):
        if not isinstance(drone, Mapping) or not isinstance(drone.get("waypoints"), list):
            raise MalformedDatasetError(EC_INPUT_FORMAT, f"drone {agent_id}: 'waypoints' must be a list")
        agent_ids.append(agent_id)
        rows.extend(_waypoint_row(agent_id, wp) for wp in drone["waypoints"])

    table = pd.DataFrame(rows, columns=list(TABLE_COLUMNS))
    # drones with no waypoints still have to be visible to validation
    table.attrs["agent_ids"] = agent_ids
    return dataset["framerate"], table


def load_dataset(source: DatasetSource) -> Tuple[Any, pd.DataFrame]:
    """Read from a path or an already parsed mapping."""
    if isinstance(source, (str, Path)):
        source = read_json(source)
    return to_waypoint_table(source)
