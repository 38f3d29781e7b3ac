from .errors import AnalysisError, MalformedDatasetError, DatasetIOError
from .config import AnalysisConfig, ReplayParams, IOParams, load_config, save_config
from .timeline import Vector3, Waypoint, AgentTimeline, TimelineStore
from .interpolation import position_at
from .motion import AgentRuntime, MotionAnalyzer, SpeedViolation
from .proximity import CollisionEvent, ProximityDetector
from .events import EventLog
from .playback import PlaybackSession, PlaybackState, TickResult
from .report import format_collision, format_speed_violation
from .engine import ReplayEngine, run_replay
