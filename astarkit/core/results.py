from __future__ import annotations

from enum import Enum, IntEnum, IntFlag
from typing import Any


class ResultCode(IntEnum):
    # Suspended, will resume via the scheduler
    PROCESSING = 1
    # Frontier exhausted without reaching a completion node
    IMPOSSIBLE = 2
    # Run limit reached and no continuation available
    CUT_OFF = 3
    # Neighbors rule asked for continuation and none is available
    CANNOT_CONTINUE = 4
    # Stopped by ControlFlag.TERMINATE
    TERMINATED = 5


class ControlFlag(IntFlag):
    NONE = 0
    TERMINATE = 0x1
    SILENT = 0x2
    UNCACHE = 0x4
    NO_CONTINUE = 0x8


class Marker(Enum):
    UNKNOWN = "unknown"
    NO_EDGE = "no_edge"

    def __repr__(self) -> str:
        return f"<{self.value}>"


UNKNOWN = Marker.UNKNOWN
NO_EDGE = Marker.NO_EDGE

# What a neighbors rule returns when it needs to be asked again later.
PROCESSING = ResultCode.PROCESSING


def is_unknown_distance(value: Any) -> bool:
    if value is None or value is UNKNOWN:
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == -1
