"""Parameter objects controlling analysis thresholds, replay stepping and output."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .errors import EC_CONFIG, EC_STORAGE_IO, AnalysisError


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class AnalysisConfig:
    """Thresholds and scaling shared by every stage of one session."""

    scale_factor: float = 0.01      # raw coordinate → metre
    collision_radius: float = 1.0   # [m] half of the minimum separation
    max_speed: float = 5.0          # [m/s]
    reference_agent: int = 0        # timeline that defines max_time
    max_log_entries: Optional[int] = None  # None → unbounded logs

    def __post_init__(self) -> None:
        """Reject values the analysis cannot work with.

        Raises:
            AnalysisError: a threshold is non-finite or out of range.
        """
        for name in ("scale_factor", "collision_radius", "max_speed"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
                raise AnalysisError(EC_CONFIG, f"{name} must be a finite number")
        if self.scale_factor <= 0:
            raise AnalysisError(EC_CONFIG, "scale_factor must be positive")
        if self.collision_radius < 0:
            raise AnalysisError(EC_CONFIG, "collision_radius must be non-negative")
        if self.max_speed < 0:
            raise AnalysisError(EC_CONFIG, "max_speed must be non-negative")
        if not _is_int(self.reference_agent) or self.reference_agent < 0:
            raise AnalysisError(EC_CONFIG, "reference_agent must be a non-negative integer")
        if self.max_log_entries is not None and (not _is_int(self.max_log_entries) or self.max_log_entries <= 0):
            raise AnalysisError(EC_CONFIG, "max_log_entries must be a positive integer or None")

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "AnalysisConfig":
        """Build a config from a mapping, ignoring keys it does not know."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ReplayParams:
    step: Optional[float] = None   # [s] None → one frame period
    start_time: float = 0.0        # [s]


@dataclass
class IOParams:
    output_filename: str = "replay"
    overwrite: bool = False
    plot: bool = True


def load_config(path: str) -> AnalysisConfig:
    """Read an `AnalysisConfig` from a JSON file.

    Args:
        path: JSON config file.

    Returns:
        The parsed config.

    Raises:
        AnalysisError: the file cannot be read or holds invalid values.
    """
    try:
        values = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise AnalysisError(EC_STORAGE_IO, f"failed to read config {path}: {exc}") from exc
    if not isinstance(values, dict):
        raise AnalysisError(EC_CONFIG, "config file must hold a JSON object")
    return AnalysisConfig.from_dict(values)


def save_config(config: AnalysisConfig, path: str, **extra: Any) -> str:
    """Write the run parameters next to the run log.

    Raises:
        AnalysisError: the file cannot be written.
    """
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {**config.to_dict(), **extra}
    try:
        out_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        return str(out_path)
    except OSError as exc:
        raise AnalysisError(EC_STORAGE_IO, f"failed to save config: {exc}") from exc
