"""Exponential backoff"""

from typing import Optional

from rebound.domain.backoff.base import BackoffEngine
from rebound.domain.config.backoff import ExponentialBackoffConfig


class ExponentialBackoff(BackoffEngine):
    """initial_delay * exponent_base ** (consecutive_failures - 1)"""

    config_class = ExponentialBackoffConfig

    def _on_failure(self, previous: Optional[float]) -> float:
        exponent = self.state.consecutive_failures - 1
        try:
            return self.config.initial_delay * self.config.exponent_base**exponent
        except OverflowError:
            # Long unlimited sequences; clamping brings it back to max_delay
            return float("inf")

    def _on_success(self, previous: Optional[float]) -> float:
        return self.config.delay_on_success
