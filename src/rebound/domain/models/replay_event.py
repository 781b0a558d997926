"""ReplayEvent model - one recorded success or failure"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EventKind(str, Enum):
    """Kind of a recorded event"""

    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class ReplayEvent:
    """A success or failure at an absolute time or relative to the previous event.

    With neither ``timestamp`` nor ``delta`` the event happens at the same time
    as the previous one.
    """

    kind: EventKind
    timestamp: Optional[float] = None  # Absolute epoch seconds
    delta: Optional[float] = None  # Seconds since the previous event

    @classmethod
    def failure(cls, timestamp: Optional[float] = None, delta: Optional[float] = None) -> "ReplayEvent":
        return cls(EventKind.FAILURE, timestamp=timestamp, delta=delta)

    @classmethod
    def success(cls, timestamp: Optional[float] = None, delta: Optional[float] = None) -> "ReplayEvent":
        return cls(EventKind.SUCCESS, timestamp=timestamp, delta=delta)
