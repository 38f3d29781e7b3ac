class AnalysisError(Exception):
    """Exception carrying one of the documented numeric error codes."""

    def __init__(self, code: int, message: str):
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class MalformedDatasetError(AnalysisError):
    """The waypoint dataset violates a structural requirement. Nothing is loaded."""


class DatasetIOError(AnalysisError):
    """The dataset file could not be read or decoded."""


# dataset structure
EC_INPUT_TYPE = -2101
EC_INPUT_FORMAT = -2102
EC_FRAMERATE = -2103
EC_CONFIG = -2104
EC_TIMELINE_EMPTY = -2201
EC_FRAME_ORDER = -2202
EC_FRAME_VALUE = -2203
EC_POSITION = -2301
EC_RENDER = -2303

# storage
EC_STORAGE_MISSING = -2701
EC_STORAGE_PERM = -2702
EC_STORAGE_EXISTS = -2703
EC_STORAGE_IO = -2704


__all__ = [
    "AnalysisError",
    "MalformedDatasetError",
    "DatasetIOError",
    "EC_INPUT_TYPE",
    "EC_INPUT_FORMAT",
    "EC_FRAMERATE",
    "EC_CONFIG",
    "EC_TIMELINE_EMPTY",
    "EC_FRAME_ORDER",
    "EC_FRAME_VALUE",
    "EC_POSITION",
    "EC_RENDER",
    "EC_STORAGE_MISSING",
    "EC_STORAGE_PERM",
    "EC_STORAGE_EXISTS",
    "EC_STORAGE_IO",
]
