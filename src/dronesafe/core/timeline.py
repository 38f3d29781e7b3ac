"""Per-drone waypoint timelines and the store that owns one loaded dataset."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, NamedTuple, Optional, Tuple

import numpy as np
import pandas as pd

from .loader import DatasetSource, load_dataset
from .errors import EC_INPUT_FORMAT, MalformedDatasetError
from .validation import validate_framerate, validate_waypoint_table

logger = logging.getLogger(__name__)


class Vector3(NamedTuple):
    x: float
    y: float
    z: float

    def distance_to(self, other: "Vector3") -> float:
        return math.dist(self, other)

    def scaled(self, factor: float) -> "Vector3":
        return Vector3(self.x * factor, self.y * factor, self.z * factor)


@dataclass(frozen=True)
class Waypoint:
    """A recorded sample. ``position`` holds raw (unscaled) coordinates."""

    frame: int
    position: Vector3


@dataclass(frozen=True)
class AgentTimeline:
    """Ordered waypoints of one drone, frames strictly increasing."""

    agent_id: int
    waypoints: Tuple[Waypoint, ...]
    frames: np.ndarray = field(init=False, repr=False, compare=False)
    coords: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        frames = np.array([wp.frame for wp in self.waypoints], dtype=np.int64)
        coords = np.array([tuple(wp.position) for wp in self.waypoints], dtype=np.float64).reshape(-1, 3)
        frames.setflags(write=False)
        coords.setflags(write=False)
        object.__setattr__(self, "frames", frames)
        object.__setattr__(self, "coords", coords)

    @classmethod
    def from_table(cls, agent_id: int, rows: pd.DataFrame) -> "AgentTimeline":
        waypoints = tuple(
            Waypoint(int(frame), Vector3(float(x), float(y), float(z)))
            for frame, x, y, z in rows[["frame", "x", "y", "z"]].itertuples(index=False, name=None)
        )
        return cls(agent_id, waypoints)

    @property
    def first_frame(self) -> int:
        return int(self.frames[0])

    @property
    def last_frame(self) -> int:
        return int(self.frames[-1])

    def __len__(self) -> int:
        return len(self.waypoints)


class TimelineStore:
    """Holds every agent timeline of one dataset plus its frame rate.

    The set of agents is fixed by :meth:`load`; a second ``load`` replaces
    the whole dataset. A failed load leaves the store untouched.
    """

    def __init__(self, reference_agent: int = 0) -> None:
        self.reference_agent = reference_agent
        self._timelines: Dict[int, AgentTimeline] = {}
        self._frame_rate: Optional[float] = None
        self._max_time: float = 0.0

    @classmethod
    def from_source(cls, source: DatasetSource, reference_agent: int = 0) -> "TimelineStore":
        store = cls(reference_agent=reference_agent)
        store.load(source)
        return store

    def load(self, dataset: DatasetSource) -> None:
        """Validate and store a dataset given as a path or a parsed mapping.

        Raises:
            MalformedDatasetError: the dataset breaks a structural rule.
            DatasetIOError: the file cannot be read.
        """
        raw_rate, table = load_dataset(dataset)
        agent_ids = list(table.attrs.get("agent_ids", []))
        frame_rate = validate_framerate(raw_rate)
        table = validate_waypoint_table(table)
        agent_ids = agent_ids or sorted(int(a) for a in table["agent_id"].unique())
        groups = dict(tuple(table.groupby("agent_id", sort=False)))
        timelines = {aid: AgentTimeline.from_table(aid, groups[aid]) for aid in agent_ids}

        if self.reference_agent not in timelines:
            raise MalformedDatasetError(
                EC_INPUT_FORMAT, f"reference drone {self.reference_agent} not in dataset ({len(timelines)} drones)"
            )
        self._timelines = timelines
        self._frame_rate = frame_rate
        self._max_time = timelines[self.reference_agent].last_frame / frame_rate
        logger.info(
            "loaded %d drones, %d waypoints, framerate=%s, max_time=%.3fs",
            len(timelines), len(table), frame_rate, self._max_time,
        )

    @property
    def loaded(self) -> bool:
        return self._frame_rate is not None

    @property
    def frame_rate(self) -> float:
        if self._frame_rate is None:
            raise RuntimeError("no dataset loaded")
        return self._frame_rate

    @property
    def max_time(self) -> float:
        return self._max_time

    @property
    def timelines(self) -> Mapping[int, AgentTimeline]:
        return MappingProxyType(self._timelines)

    @property
    def agent_ids(self) -> Tuple[int, ...]:
        return tuple(self._timelines)

    def timeline(self, agent_id: int) -> AgentTimeline:
        return self._timelines[agent_id]

    def frame_to_seconds(self, frame: float) -> float:
        return frame / self.frame_rate

    def seconds_to_frame(self, seconds: float) -> int:
        return math.floor(seconds * self.frame_rate)

    def __len__(self) -> int:
        return len(self._timelines)

    def __iter__(self):
        return iter(self._timelines.values())
