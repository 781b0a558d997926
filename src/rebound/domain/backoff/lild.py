"""LILD (linear increase, linear decrease) backoff"""

from typing import Optional

from rebound.domain.backoff.base import BackoffEngine
from rebound.domain.config.backoff import LILDBackoffConfig


class LILDBackoff(BackoffEngine):
    config_class = LILDBackoffConfig

    def _on_failure(self, previous: Optional[float]) -> float:
        if previous is None:
            return self.config.initial_delay
        return previous + self.config.increment

    def _on_success(self, previous: Optional[float]) -> float:
        return max((previous or 0.0) - self.config.decrement, 0.0)
