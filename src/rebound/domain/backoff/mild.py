"""MILD (multiplicative increase, linear decrease) backoff"""

from typing import Optional

from rebound.domain.backoff.base import BackoffEngine
from rebound.domain.config.backoff import MILDBackoffConfig


class MILDBackoff(BackoffEngine):
    config_class = MILDBackoffConfig

    def _on_failure(self, previous: Optional[float]) -> float:
        # A delay decayed to zero would stay there under multiplication
        if not previous:
            return self.config.initial_delay
        return previous * self.config.increase_factor

    def _on_success(self, previous: Optional[float]) -> float:
        return max((previous or 0.0) - self.config.decrement, 0.0)
