"""Playback driver: time cursor plus the per-tick analysis pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from .config import AnalysisConfig
from .events import EventLog
from .interpolation import position_at
from .motion import MotionAnalyzer, SpeedViolation
from .proximity import CollisionEvent, ProximityDetector
from .report import format_collision, format_speed_violation
from .timeline import TimelineStore, Vector3

_END_EPS = 1e-9


@dataclass
class PlaybackState:
    current_time: float = 0.0
    is_playing: bool = False
    max_time: float = 0.0


@dataclass(frozen=True)
class TickResult:
    """Immutable snapshot of one analysis step, handed to presentation."""

    time: float
    positions: Mapping[int, Vector3]
    speed_violations: Tuple[SpeedViolation, ...]
    collisions: Tuple[CollisionEvent, ...]


class PlaybackSession:
    """One loaded dataset being replayed.

    All per-session state (time cursor, motion baselines, cumulative logs)
    lives here. Calls are synchronous; ``seek``/``reset`` complete before the
    next ``tick`` can observe them.
    """

    def __init__(
        self,
        store: TimelineStore,
        config: Optional[AnalysisConfig] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if not store.loaded:
            raise ValueError("TimelineStore has no dataset loaded")
        self.store = store
        self.config = config or AnalysisConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.state = PlaybackState(max_time=store.max_time)
        self.motion = MotionAnalyzer(self.config.max_speed)
        self.proximity = ProximityDetector(self.config.collision_radius)
        for agent_id in store.agent_ids:
            self.motion.runtime_for(agent_id)
        self.speed_violations: EventLog[SpeedViolation] = EventLog(self.config.max_log_entries)
        self.collisions: EventLog[CollisionEvent] = EventLog(self.config.max_log_entries)
        self.last_result: Optional[TickResult] = None

    @property
    def frame_period(self) -> float:
        return 1.0 / self.store.frame_rate

    def _clamp(self, time: float) -> float:
        return min(max(float(time), 0.0), self.state.max_time)

    # --- analysis ---
    def tick(self, time: Optional[float] = None) -> TickResult:
        """Run one analysis step at ``time`` (default: the current cursor)."""
        if time is None:
            time = self.state.current_time
        time = float(time)
        self.state.current_time = time
        frame_rate = self.store.frame_rate

        positions: Dict[int, Vector3] = {}
        violations: List[SpeedViolation] = []
        for timeline in self.store:
            pos = position_at(timeline, time, frame_rate, self.config.scale_factor)
            if pos is None:
                continue
            positions[timeline.agent_id] = pos
            violation = self.motion.observe(timeline.agent_id, pos, time, frame_rate)
            if violation is not None:
                violations.append(violation)

        # every drone is advanced before the pairwise scan
        collisions = self.proximity.scan_all(positions, time)

        self.speed_violations.extend(violations)
        self.collisions.extend(collisions)
        for v in violations:
            self.logger.debug("speed warning: %s", format_speed_violation(v))
        for c in collisions:
            self.logger.debug("collision: %s", format_collision(c))

        result = TickResult(
            time=time,
            positions=MappingProxyType(positions),
            speed_violations=tuple(violations),
            collisions=tuple(collisions),
        )
        self.last_result = result
        return result

    # --- cursor control ---
    def seek(self, time: float) -> float:
        """Move the cursor, clamped to ``[0, max_time]``.

        Motion baselines are cleared so the jump is not read as speed.
        Cumulative logs are kept.
        """
        self.state.current_time = self._clamp(time)
        self.motion.clear()
        self.last_result = None
        return self.state.current_time

    @property
    def scrub_position(self) -> float:
        """Cursor as a percentage of ``max_time`` in ``[0, 100]``."""
        if self.state.max_time <= 0:
            return 0.0
        return self.state.current_time / self.state.max_time * 100.0

    def seek_scrub(self, percent: float) -> float:
        percent = min(max(float(percent), 0.0), 100.0)
        return self.seek(percent / 100.0 * self.state.max_time)

    def reset(self) -> None:
        """Back to time zero, paused, with fresh baselines. Logs are kept."""
        self.state.current_time = 0.0
        self.state.is_playing = False
        self.motion.clear()
        self.last_result = None

    def play(self) -> None:
        self.state.is_playing = True

    def pause(self) -> None:
        self.state.is_playing = False

    def toggle(self) -> bool:
        self.state.is_playing = not self.state.is_playing
        return self.state.is_playing

    def advance(self, dt: Optional[float] = None) -> TickResult:
        """Move forward by ``dt`` (default one frame period) and tick.

        Playback stops once the cursor reaches ``max_time``.
        """
        step = self.frame_period if dt is None else float(dt)
        time = min(self.state.current_time + step, self.state.max_time)
        # accumulated float steps land just short of the end
        if self.state.max_time - time < _END_EPS:
            time = self.state.max_time
        result = self.tick(time)
        if time >= self.state.max_time:
            self.state.is_playing = False
        return result

    @property
    def finished(self) -> bool:
        return self.state.current_time >= self.state.max_time

    # --- presentation ---
    def collision_lines(self) -> List[str]:
        return [format_collision(c) for c in self.collisions]

    def speed_lines(self) -> List[str]:
        return [format_speed_violation(v) for v in self.speed_violations]
