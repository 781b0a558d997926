"""MIMD (multiplicative increase, multiplicative decrease) backoff"""

from typing import Optional

from rebound.domain.backoff.base import BackoffEngine
from rebound.domain.config.backoff import MIMDBackoffConfig


class MIMDBackoff(BackoffEngine):
    config_class = MIMDBackoffConfig

    def _on_failure(self, previous: Optional[float]) -> float:
        if not previous:
            return self.config.initial_delay
        return previous * self.config.increase_factor

    def _on_success(self, previous: Optional[float]) -> float:
        return (previous or 0.0) * self.config.decrease_factor
