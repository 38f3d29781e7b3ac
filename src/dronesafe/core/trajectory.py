"""ドローン軌跡を上面図(x-z)に描画しPNG出力するためのユーティリティ。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import numpy as np
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .interpolation import position_at
from .motion import SpeedViolation
from .proximity import CollisionEvent
from .errors import EC_RENDER, EC_STORAGE_IO, AnalysisError
from .timeline import TimelineStore


@dataclass(frozen=True)
class TrajectoryPlotter:
    """違反地点マーカー付きの軌跡上面図。"""

    scale: float = 0.01
    style: Dict[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        defaults = {
            "dpi": 144,
            "width_px": 1280,
            "height_px": 720,
            "line_width": 1.5,
            "start_marker_size_px": 6,
            "end_marker_size_px": 8,
            "event_marker_size_px": 7,
        }
        object.__setattr__(self, "style", dict(defaults | dict(self.style)))

    def _event_points(
        self,
        store: TimelineStore,
        agent_times: Iterable[Tuple[int, float]],
    ) -> np.ndarray:
        points: List[Tuple[float, float]] = []
        for agent_id, time in agent_times:
            pos = position_at(store.timeline(agent_id), time, store.frame_rate, self.scale)
            if pos is not None:
                points.append((pos.x, pos.z))
        return np.array(points, dtype=np.float64).reshape(-1, 2)

    def plot(
        self,
        store: TimelineStore,
        collisions: Iterable[CollisionEvent] = (),
        speed_violations: Iterable[SpeedViolation] = (),
    ) -> plt.Figure:
        """全ドローンの軌跡と違反地点を描画し、Figureを返す。

        Args:
            store: 読み込み済みのタイムライン。
            collisions: 衝突イベント（両機の位置に×印）。
            speed_violations: 速度超過（該当機の位置に▲印）。

        Returns:
            描画済みFigure。

        Raises:
            AnalysisError: 描画に失敗した場合。
        """
        dpi = self.style["dpi"]
        fig, ax = plt.subplots(
            figsize=(self.style["width_px"] / dpi, self.style["height_px"] / dpi),
            dpi=dpi,
        )
        try:
            ax.set_facecolor("white")
            cmap = plt.get_cmap("tab10")
            for i, timeline in enumerate(store):
                xz = timeline.coords[:, [0, 2]] * self.scale
                color = cmap(i % cmap.N)
                ax.plot(xz[:, 0], xz[:, 1], linewidth=float(self.style["line_width"]),
                        color=color, alpha=0.85, label=f"Drone {timeline.agent_id}")
                ax.scatter(xz[0, 0], xz[0, 1], s=self.style["start_marker_size_px"] ** 2,
                           color=color, marker="o", zorder=3)
                ax.scatter(xz[-1, 0], xz[-1, 1], s=self.style["end_marker_size_px"] ** 2,
                           color=color, marker="s", zorder=3)

            hits = self._event_points(
                store,
                ((aid, c.time) for c in collisions for aid in (c.agent_a, c.agent_b)),
            )
            if len(hits):
                ax.scatter(hits[:, 0], hits[:, 1], s=self.style["event_marker_size_px"] ** 2,
                           c="#d62728", marker="x", zorder=4, label="collision")
            fast = self._event_points(store, ((v.agent_id, v.time) for v in speed_violations))
            if len(fast):
                ax.scatter(fast[:, 0], fast[:, 1], s=self.style["event_marker_size_px"] ** 2,
                           c="#ff7f0e", marker="^", zorder=4, label="speed")

            ax.set_title("Drone trajectories (x-z)")
            ax.set_xlabel("x [m]")
            ax.set_ylabel("z [m]")
            ax.set_aspect("equal", adjustable="datalim")
            ax.grid(True, alpha=0.3)
            ax.legend(loc="best", fontsize="small")
            fig.tight_layout()
            return fig
        except Exception as exc:  # noqa: BLE001
            plt.close(fig)
            raise AnalysisError(EC_RENDER, f"failed to render trajectories: {exc}") from exc

    def save_png(self, fig: plt.Figure, path: str) -> str:
        out_path = Path(path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fig.savefig(out_path, dpi=self.style["dpi"], bbox_inches="tight")
            return str(out_path)
        except OSError as exc:
            raise AnalysisError(EC_STORAGE_IO, f"failed to save trajectory png: {exc}") from exc
        finally:
            plt.close(fig)
