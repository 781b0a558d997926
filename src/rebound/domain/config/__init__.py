"""Configuration models with Pydantic validation."""

from rebound.domain.config.app import AppConfig
from rebound.domain.config.backoff import (
    COMMON_FIELDS,
    Algorithm,
    BackoffConfig,
    BaseBackoffConfig,
    ConstantBackoffConfig,
    ExponentialBackoffConfig,
    FibonacciBackoffConfig,
    LILDBackoffConfig,
    LIMDBackoffConfig,
    MILDBackoffConfig,
    MIMDBackoffConfig,
)
from rebound.domain.config.retry import RetryConfig

__all__ = [
    "AppConfig",
    "Algorithm",
    "BackoffConfig",
    "BaseBackoffConfig",
    "COMMON_FIELDS",
    "ConstantBackoffConfig",
    "ExponentialBackoffConfig",
    "FibonacciBackoffConfig",
    "LILDBackoffConfig",
    "LIMDBackoffConfig",
    "MILDBackoffConfig",
    "MIMDBackoffConfig",
    "RetryConfig",
]
