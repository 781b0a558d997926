"""Base backoff engine interface"""

import logging
import random
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional, Type

from rebound.domain.config.backoff import BaseBackoffConfig
from rebound.domain.errors import ConfigError
from rebound.domain.models.backoff_state import BackoffState

logger = logging.getLogger(__name__)

GIVE_UP = -1.0


class BackoffEngine(ABC):
    """Abstract base class for backoff algorithms.

    Subclasses only provide the growth rule (``_on_failure``) and the decay
    rule (``_on_success``). Budgets, clamping, jitter and the actual-delay
    correction are shared.
    """

    config_class: Type[BaseBackoffConfig] = BaseBackoffConfig

    def __init__(
        self,
        config: BaseBackoffConfig,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize engine with configuration

        Args:
            config: Validated configuration of this engine's algorithm
            rng: Random source for jitter (default: module-level random)
            clock: Returns "now" when failure()/success() get no timestamp

        Raises:
            ConfigError: If configuration does not belong to this algorithm
        """
        self._validate_config(config)
        self.config = config
        self.state = BackoffState()
        self._rng = rng or random.Random()
        self._clock = clock or time.time

    def _validate_config(self, config: BaseBackoffConfig) -> None:
        if not isinstance(config, self.config_class):
            raise ConfigError(
                f"{type(self).__name__} needs {self.config_class.__name__}, "
                f"got {type(config).__name__}"
            )

    @abstractmethod
    def _on_failure(self, previous: Optional[float]) -> float:
        """Growth rule

        Args:
            previous: Previous pre-jitter delay, None before the first failure

        Returns:
            Unclamped delay in seconds
        """

    @abstractmethod
    def _on_success(self, previous: Optional[float]) -> float:
        """Decay rule

        Args:
            previous: Previous pre-jitter delay, None before the first failure

        Returns:
            Unclamped delay in seconds
        """

    def failure(self, timestamp: Optional[float] = None) -> float:
        """Record a failure

        Args:
            timestamp: Time of the failure (default: now)

        Returns:
            Seconds to wait before the next attempt, or GIVE_UP
        """
        now = self._clock() if timestamp is None else timestamp
        state = self.state
        state.attempt_count += 1
        state.consecutive_failures += 1
        if state.first_failure_time is None:
            state.first_failure_time = now

        cfg = self.config
        if cfg.max_attempts > 0 and state.attempt_count > cfg.max_attempts:
            logger.debug(f"Attempt budget exhausted ({state.attempt_count - 1}/{cfg.max_attempts})")
            return GIVE_UP
        if cfg.max_actual_duration > 0 and now - state.first_failure_time > cfg.max_actual_duration:
            logger.debug(
                f"Duration budget exhausted ({now - state.first_failure_time:.3f}s "
                f"> {cfg.max_actual_duration}s)"
            )
            return GIVE_UP

        delay = self._clamp(self._on_failure(state.current_delay))
        state.current_delay = delay
        return self._finish(self._add_jitter(delay), now)

    def success(self, timestamp: Optional[float] = None) -> float:
        """Record a success

        Attempt count and first failure time are kept: the budgets span the
        whole sequence, not a single failure streak.

        Args:
            timestamp: Time of the success (default: now)

        Returns:
            The resulting current delay (informational)
        """
        now = self._clock() if timestamp is None else timestamp
        state = self.state
        state.consecutive_failures = 0
        delay = self._clamp(self._on_success(state.current_delay))
        if state.current_delay is not None:
            state.current_delay = delay
        return self._finish(delay, now)

    def _clamp(self, delay: float) -> float:
        cfg = self.config
        if cfg.max_delay is not None and delay > cfg.max_delay:
            delay = cfg.max_delay
        if delay < cfg.min_delay:
            delay = cfg.min_delay
        return delay

    def _add_jitter(self, delay: float) -> float:
        factor = self.config.jitter_factor
        if factor <= 0 or delay <= 0:
            return delay
        jittered = delay - self._rng.uniform(0, factor * delay)
        return max(jittered, self.config.min_delay)

    def _finish(self, delay: float, now: float) -> float:
        state = self.state
        if self.config.consider_actual_delay and state.last_timestamp is not None:
            elapsed = now - state.last_timestamp
            delay = max(self.config.min_delay, delay + state.last_delay - elapsed)
            if self.config.max_delay is not None:
                delay = min(delay, self.config.max_delay)
        state.last_timestamp = now
        state.last_delay = delay
        return delay

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config!r})"
