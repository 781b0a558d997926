"""Fibonacci backoff"""

from typing import Optional

from rebound.domain.backoff.base import BackoffEngine
from rebound.domain.config.backoff import FibonacciBackoffConfig


def fibonacci(n: int) -> int:
    """n-th Fibonacci number, fibonacci(1) == fibonacci(2) == 1"""
    a, b = 0, 1
    for _ in range(n):
        a, b = b, a + b
    return a


class FibonacciBackoff(BackoffEngine):
    """initial_delay scaled by 1, 1, 2, 3, 5, 8, ... per consecutive failure"""

    config_class = FibonacciBackoffConfig

    def _on_failure(self, previous: Optional[float]) -> float:
        return self.config.initial_delay * fibonacci(self.state.consecutive_failures)

    def _on_success(self, previous: Optional[float]) -> float:
        # consecutive_failures was reset, so the sequence restarts from 1
        return self.config.delay_on_success
