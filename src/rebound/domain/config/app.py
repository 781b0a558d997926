"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from rebound.domain.config.backoff import BackoffConfig, ExponentialBackoffConfig
from rebound.domain.config.retry import RetryConfig


class AppConfig(BaseModel):
    """Main application configuration.

    Root model aggregating all configuration sections. Validation happens at
    load time so a bad config file fails before any command is run.

    Attributes:
        backoff: Backoff algorithm and its parameters
        retry: Retry loop behaviour
    """

    backoff: BackoffConfig = Field(
        default_factory=lambda: ExponentialBackoffConfig(initial_delay=1.0)
    )
    retry: RetryConfig = Field(default_factory=RetryConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "backoff": {
                    "algorithm": "exponential",
                    "initial_delay": 1.0,
                    "exponent_base": 2.0,
                    "max_delay": 300.0,
                    "max_attempts": 10,
                    "jitter_factor": 0.1,
                },
                "retry": {
                    "retry_on": None,
                    "success_on": "0,2",
                    "dry_run": False,
                    "skip_delay": False,
                    "launch_error_policy": "raise",
                },
            }
        },
    )
