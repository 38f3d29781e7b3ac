"""Tick-to-tick speed estimation and speed-limit checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from .timeline import Vector3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpeedViolation:
    agent_id: int
    time: float
    speed: float


@dataclass
class AgentRuntime:
    """Mutable per-drone state carried across ticks of a session."""

    agent_id: int
    last_position: Optional[Vector3] = None


class MotionAnalyzer:
    """Derives instantaneous speed from consecutive observed positions.

    Successive observations are treated as exactly one frame period apart,
    so ``speed = distance * frame_rate``. Wall time between calls is not
    measured.
    """

    def __init__(self, max_speed: float) -> None:
        self.max_speed = float(max_speed)
        self.runtimes: Dict[int, AgentRuntime] = {}

    def runtime_for(self, agent_id: int) -> AgentRuntime:
        runtime = self.runtimes.get(agent_id)
        if runtime is None:
            runtime = self.runtimes[agent_id] = AgentRuntime(agent_id)
        return runtime

    def observe(
        self,
        agent_id: int,
        new_position: Vector3,
        time: float,
        frame_rate: float,
    ) -> Optional[SpeedViolation]:
        """Record ``new_position`` and return a violation if the implied speed is too high.

        The first observation of a drone only establishes the baseline.
        """
        runtime = self.runtime_for(agent_id)
        previous = runtime.last_position
        runtime.last_position = new_position
        if previous is None:
            return None

        speed = Vector3(*new_position).distance_to(previous) * frame_rate
        if speed > self.max_speed:
            logger.debug("drone %s speed %.3f > %.3f at %.3fs", agent_id, speed, self.max_speed, time)
            return SpeedViolation(agent_id, time, speed)
        return None

    def clear(self) -> None:
        """Forget every baseline; the next observation of each drone starts fresh."""
        for runtime in self.runtimes.values():
            runtime.last_position = None
