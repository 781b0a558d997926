"""Shared fixtures"""

from typing import List

import pytest

from rebound.infrastructure.clock import Clock


class ManualClock(Clock):
    """Clock that only moves when slept on"""

    def __init__(self, start: float = 1000.0):
        self.current = start
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self.current

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += seconds


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()
