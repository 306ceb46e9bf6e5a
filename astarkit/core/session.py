from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Hashable, List, Optional, Set, Union

from .frontier import Frontier
from .path import SearchPath
from .results import NO_EDGE, ControlFlag, ResultCode


class SessionState(str, Enum):
    CREATED = "created"
    SEARCHING = "searching"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    IMPOSSIBLE = "impossible"
    CUT_OFF = "cut_off"
    CANNOT_CONTINUE = "cannot_continue"
    TERMINATED = "terminated"


TERMINAL_STATES = {
    SessionState.COMPLETED,
    SessionState.IMPOSSIBLE,
    SessionState.CUT_OFF,
    SessionState.CANNOT_CONTINUE,
    SessionState.TERMINATED,
}

STATE_FOR_CODE = {
    ResultCode.IMPOSSIBLE: SessionState.IMPOSSIBLE,
    ResultCode.CUT_OFF: SessionState.CUT_OFF,
    ResultCode.CANNOT_CONTINUE: SessionState.CANNOT_CONTINUE,
    ResultCode.TERMINATED: SessionState.TERMINATED,
}

Result = Union[None, SearchPath, ResultCode]


@dataclass(eq=False)
class PathfindSession:
    """State of one find_path request, possibly spanning several cycles.

    Rules receive the session as their argument and may read any field;
    ``active_path``, ``active_node`` and ``active_edge`` describe what the
    engine is examining at the moment of the call. Only ``control_flags``
    is meant to be changed from outside the engine.
    """

    from_node: Any
    to_node: Any
    validate: Optional[Callable[["PathfindSession"], Any]] = None
    callback: Optional[Callable[["PathfindSession"], Any]] = None
    extra: Any = None
    control_flags: ControlFlag = ControlFlag.NONE
    visited: Set[Hashable] = field(default_factory=set)
    expanded: Dict[Hashable, SearchPath] = field(default_factory=dict)
    to_key: Any = None
    reached: Dict[Hashable, SearchPath] = field(default_factory=dict)
    frontier: Frontier = field(default_factory=Frontier)
    pending: List[SearchPath] = field(default_factory=list)
    best_candidate: Optional[SearchPath] = None
    start_time: float = field(default_factory=time.time)
    cycle_start: Optional[float] = None
    cycle_index: int = 0
    cycle_iterations: int = 0
    active_path: Optional[SearchPath] = None
    active_node: Any = None
    active_edge: Any = NO_EDGE
    result: Result = None
    state: SessionState = SessionState.CREATED

    def has_flag(self, flag: ControlFlag) -> bool:
        return bool(self.control_flags & flag)

    def set_flag(self, flag: ControlFlag) -> None:
        self.control_flags |= flag

    def terminate(self) -> None:
        self.set_flag(ControlFlag.TERMINATE)

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def succeeded(self) -> bool:
        return isinstance(self.result, SearchPath)

    @property
    def path(self) -> Optional[SearchPath]:
        return self.result if isinstance(self.result, SearchPath) else None

    @property
    def result_code(self) -> Optional[ResultCode]:
        return self.result if isinstance(self.result, ResultCode) else None

    def summary(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "state": self.state.value,
            "cycles": self.cycle_index,
            "visited": len(self.visited),
        }
        if self.path is not None:
            payload["path"] = self.path.to_dict()
        elif self.result_code is not None:
            payload["result"] = self.result_code.name
        return payload
