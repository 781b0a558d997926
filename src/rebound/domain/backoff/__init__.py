"""Backoff algorithm engines"""

from rebound.domain.backoff.base import GIVE_UP, BackoffEngine
from rebound.domain.backoff.constant import ConstantBackoff
from rebound.domain.backoff.exponential import ExponentialBackoff
from rebound.domain.backoff.factory import BackoffEngineFactory, parse_backoff_config
from rebound.domain.backoff.fibonacci import FibonacciBackoff
from rebound.domain.backoff.lild import LILDBackoff
from rebound.domain.backoff.limd import LIMDBackoff
from rebound.domain.backoff.mild import MILDBackoff
from rebound.domain.backoff.mimd import MIMDBackoff

__all__ = [
    "GIVE_UP",
    "BackoffEngine",
    "BackoffEngineFactory",
    "ConstantBackoff",
    "ExponentialBackoff",
    "FibonacciBackoff",
    "LILDBackoff",
    "LIMDBackoff",
    "MILDBackoff",
    "MIMDBackoff",
    "parse_backoff_config",
]
