"""astarkit package."""

from .api import EngineBundle, create_engine, grid_engine, solve
from .core.engine import AstarEngine
from .core.path import SearchPath
from .core.results import NO_EDGE, PROCESSING, UNKNOWN, ControlFlag, ResultCode
from .core.session import PathfindSession, SessionState
from .core.version import __version__

__all__ = [
    "AstarEngine",
    "ControlFlag",
    "EngineBundle",
    "NO_EDGE",
    "PROCESSING",
    "PathfindSession",
    "ResultCode",
    "SearchPath",
    "SessionState",
    "UNKNOWN",
    "create_engine",
    "grid_engine",
    "solve",
    "__version__",
]
