"""Constant backoff"""

from typing import Optional

from rebound.domain.backoff.base import BackoffEngine
from rebound.domain.config.backoff import ConstantBackoffConfig


class ConstantBackoff(BackoffEngine):
    """Same delay after every failure"""

    config_class = ConstantBackoffConfig

    def _on_failure(self, previous: Optional[float]) -> float:
        return self.config.delay

    def _on_success(self, previous: Optional[float]) -> float:
        return self.config.delay_on_success
