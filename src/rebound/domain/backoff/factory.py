"""Factory for creating backoff engines"""

import logging
import random
from typing import Any, Callable, Dict, Mapping, Optional, Type, Union

from pydantic import TypeAdapter, ValidationError

from rebound.domain.backoff.base import BackoffEngine
from rebound.domain.backoff.constant import ConstantBackoff
from rebound.domain.backoff.exponential import ExponentialBackoff
from rebound.domain.backoff.fibonacci import FibonacciBackoff
from rebound.domain.backoff.lild import LILDBackoff
from rebound.domain.backoff.limd import LIMDBackoff
from rebound.domain.backoff.mild import MILDBackoff
from rebound.domain.backoff.mimd import MIMDBackoff
from rebound.domain.config.backoff import Algorithm, BackoffConfig, BaseBackoffConfig
from rebound.domain.errors import ConfigError

logger = logging.getLogger(__name__)

_config_adapter = TypeAdapter(BackoffConfig)


def parse_backoff_config(params: Mapping[str, Any]) -> BaseBackoffConfig:
    """Validate a plain mapping of parameters into the matching config model

    Args:
        params: Parameters including "algorithm" (case-insensitive)

    Returns:
        Config model of the selected algorithm

    Raises:
        ConfigError: If the algorithm is unknown or parameters are invalid
    """
    data = dict(params)
    algorithm = data.get("algorithm")
    if algorithm is None:
        raise ConfigError("Please specify algorithm")
    try:
        data["algorithm"] = Algorithm(str(algorithm).lower()).value
    except ValueError:
        available = ", ".join(a.value for a in Algorithm)
        raise ConfigError(
            f"Unknown backoff algorithm: {algorithm}. Available algorithms: {available}"
        ) from None
    try:
        return _config_adapter.validate_python(data)
    except ValidationError as e:
        raise ConfigError.from_validation_error(
            e, f"Invalid {data['algorithm']} backoff configuration"
        ) from e


class BackoffEngineFactory:
    """Factory for creating backoff engine instances"""

    ENGINES: Dict[Algorithm, Type[BackoffEngine]] = {
        Algorithm.CONSTANT: ConstantBackoff,
        Algorithm.EXPONENTIAL: ExponentialBackoff,
        Algorithm.FIBONACCI: FibonacciBackoff,
        Algorithm.LILD: LILDBackoff,
        Algorithm.LIMD: LIMDBackoff,
        Algorithm.MILD: MILDBackoff,
        Algorithm.MIMD: MIMDBackoff,
    }

    @classmethod
    def create(
        cls,
        config: Union[BaseBackoffConfig, Mapping[str, Any]],
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> BackoffEngine:
        """Create a fresh engine

        Args:
            config: Validated config model or a mapping of raw parameters
            rng: Random source for jitter
            clock: Time source used when no timestamp is passed

        Returns:
            BackoffEngine instance with empty state

        Raises:
            ConfigError: If the configuration is invalid
        """
        if not isinstance(config, BaseBackoffConfig):
            config = parse_backoff_config(config)
        engine_class = cls.ENGINES[Algorithm(config.algorithm)]
        logger.debug(f"Creating {config.algorithm} backoff engine")
        return engine_class(config, rng=rng, clock=clock)
