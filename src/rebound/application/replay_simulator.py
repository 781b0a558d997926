"""Delay replay simulator - previews the delays of a recorded history"""

import logging
from typing import Iterable, List, Optional, Tuple

from rebound.domain.backoff.base import BackoffEngine
from rebound.domain.errors import InvalidEventError
from rebound.domain.models.replay_event import EventKind, ReplayEvent
from rebound.infrastructure.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class DelayReplaySimulator:
    """Feeds recorded successes/failures into an engine and collects its delays.

    Nothing is executed and nothing sleeps: the output is a deterministic
    trace of engine results (GIVE_UP included) for the given history.
    """

    def __init__(self, clock: Optional[Clock] = None, start_time: Optional[float] = None):
        """Initialize simulator

        Args:
            clock: Seeds the virtual clock when start_time is not given
            start_time: Virtual time of events without timestamp or delta
        """
        self.start_time = start_time if start_time is not None else (clock or SystemClock()).now()

    def replay(self, events: Iterable[ReplayEvent], backoff_engine: BackoffEngine) -> List[float]:
        """Replay events against an engine

        Args:
            events: Ordered successes/failures
            backoff_engine: Fresh engine to feed

        Returns:
            One delay per event

        Raises:
            InvalidEventError: On a malformed event; earlier events stay applied
        """
        virtual_time = self.start_time
        delays: List[float] = []
        for index, event in enumerate(events):
            kind, virtual_time = self._resolve(index, event, virtual_time)
            if kind is EventKind.FAILURE:
                delay = backoff_engine.failure(virtual_time)
            else:
                delay = backoff_engine.success(virtual_time)
            logger.debug(f"Event #{index} {kind.value} at {virtual_time}: {delay}")
            delays.append(delay)
        return delays

    @staticmethod
    def _resolve(index: int, event: ReplayEvent, virtual_time: float) -> Tuple[EventKind, float]:
        try:
            kind = EventKind(event.kind)
        except ValueError:
            raise InvalidEventError(index, f"unknown event kind {event.kind!r}") from None
        if event.timestamp is not None and event.delta is not None:
            raise InvalidEventError(index, "event has both timestamp and delta")
        if event.delta is not None:
            if event.delta < 0:
                raise InvalidEventError(index, f"negative delta {event.delta}")
            return kind, virtual_time + event.delta
        if event.timestamp is not None:
            return kind, float(event.timestamp)
        return kind, virtual_time
