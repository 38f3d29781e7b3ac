"""Exhaustive pairwise separation checks between drones."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping

import numpy as np

from .timeline import Vector3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollisionEvent:
    agent_a: int
    agent_b: int
    time: float


class ProximityDetector:
    """Reports every pair of drones closer than ``2 * collision_radius``.

    The scan is brute force: an ``n x n`` distance matrix per call. That is
    the known scaling limit for large fleets. Nothing is deduplicated, a pair
    that stays close is reported again on every scan.
    """

    def __init__(self, collision_radius: float) -> None:
        self.collision_radius = float(collision_radius)

    @property
    def threshold(self) -> float:
        return 2.0 * self.collision_radius

    def scan_all(self, positions: Mapping[int, Vector3], time: float) -> List[CollisionEvent]:
        """Check all unordered pairs present in ``positions``.

        Args:
            positions: drone id → current position; absent drones are skipped.
            time: playback time stamped on the events.

        Returns:
            One event per offending pair, ``agent_a < agent_b``, sorted by pair.
        """
        ids = sorted(positions)
        if len(ids) < 2:
            return []
        coords = np.array([tuple(positions[i]) for i in ids], dtype=np.float64)
        diff = coords[:, None, :] - coords[None, :, :]
        dist = np.sqrt((diff ** 2).sum(axis=-1))

        rows, cols = np.nonzero(np.triu(dist < self.threshold, k=1))
        events = [CollisionEvent(ids[i], ids[j], time) for i, j in zip(rows.tolist(), cols.tolist())]
        if events:
            logger.debug("%d close pairs at %.3fs", len(events), time)
        return events
