"""Backoff algorithm configuration models.

Each algorithm has its own model; the ``algorithm`` field is the tag of the
``BackoffConfig`` union, so a parameter that belongs to another algorithm is
rejected instead of silently ignored.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Algorithm(str, Enum):
    """Supported backoff algorithms"""

    CONSTANT = "constant"
    EXPONENTIAL = "exponential"
    FIBONACCI = "fibonacci"
    LILD = "lild"
    LIMD = "limd"
    MILD = "mild"
    MIMD = "mimd"


COMMON_FIELDS = (
    "min_delay",
    "max_delay",
    "max_attempts",
    "max_actual_duration",
    "jitter_factor",
    "consider_actual_delay",
)


class BaseBackoffConfig(BaseModel):
    """Parameters common to all algorithms.

    Attributes:
        min_delay: Floor applied to every computed delay
        max_delay: Ceiling applied to every computed delay (None = unbounded)
        max_attempts: Failures allowed before giving up (0 = unlimited)
        max_actual_duration: Seconds since the first failure before giving up (0 = unlimited)
        jitter_factor: Fraction of the delay randomly subtracted (0.0-1.0)
        consider_actual_delay: Count time elapsed since the previous event toward the delay
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_delay: float = Field(0.0, ge=0.0)
    max_delay: Optional[float] = Field(None, gt=0.0)
    max_attempts: int = Field(0, ge=0)
    max_actual_duration: float = Field(0.0, ge=0.0)
    jitter_factor: float = Field(0.0, ge=0.0, le=1.0)
    consider_actual_delay: bool = False

    @model_validator(mode="after")
    def _check_delay_bounds(self):
        if self.max_delay is not None and self.min_delay > self.max_delay:
            raise ValueError(
                f"min_delay ({self.min_delay}) must not exceed max_delay ({self.max_delay})"
            )
        return self


class ConstantBackoffConfig(BaseBackoffConfig):
    algorithm: Literal["constant"] = "constant"
    delay: float = Field(..., ge=0.0)
    delay_on_success: float = Field(0.0, ge=0.0)


class ExponentialBackoffConfig(BaseBackoffConfig):
    algorithm: Literal["exponential"] = "exponential"
    initial_delay: float = Field(..., ge=0.0)
    exponent_base: float = Field(2.0, ge=1.0)
    delay_on_success: float = Field(0.0, ge=0.0)


class FibonacciBackoffConfig(BaseBackoffConfig):
    algorithm: Literal["fibonacci"] = "fibonacci"
    initial_delay: float = Field(..., ge=0.0)
    delay_on_success: float = Field(0.0, ge=0.0)


class LILDBackoffConfig(BaseBackoffConfig):
    """Linear increase, linear decrease"""

    algorithm: Literal["lild"] = "lild"
    initial_delay: float = Field(..., ge=0.0)
    increment: float = Field(..., ge=0.0)
    decrement: float = Field(..., ge=0.0)


class LIMDBackoffConfig(BaseBackoffConfig):
    """Linear increase, multiplicative decrease"""

    algorithm: Literal["limd"] = "limd"
    initial_delay: float = Field(..., ge=0.0)
    increment: float = Field(..., ge=0.0)
    decrease_factor: float = Field(..., ge=0.0, le=1.0)


class MILDBackoffConfig(BaseBackoffConfig):
    """Multiplicative increase, linear decrease"""

    algorithm: Literal["mild"] = "mild"
    initial_delay: float = Field(..., ge=0.0)
    increase_factor: float = Field(..., ge=1.0)
    decrement: float = Field(..., ge=0.0)


class MIMDBackoffConfig(BaseBackoffConfig):
    """Multiplicative increase, multiplicative decrease"""

    algorithm: Literal["mimd"] = "mimd"
    initial_delay: float = Field(..., ge=0.0)
    increase_factor: float = Field(..., ge=1.0)
    decrease_factor: float = Field(..., ge=0.0, le=1.0)


BackoffConfig = Annotated[
    Union[
        ConstantBackoffConfig,
        ExponentialBackoffConfig,
        FibonacciBackoffConfig,
        LILDBackoffConfig,
        LIMDBackoffConfig,
        MILDBackoffConfig,
        MIMDBackoffConfig,
    ],
    Field(discriminator="algorithm"),
]
