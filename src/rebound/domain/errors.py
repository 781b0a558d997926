"""Error taxonomy shared by all layers"""

from typing import Optional, Sequence

from pydantic import ValidationError


class ReboundError(Exception):
    """Base class for all rebound errors"""


class ConfigError(ReboundError):
    """Invalid or missing backoff/retry parameters."""

    @classmethod
    def from_validation_error(cls, error: ValidationError, title: str) -> "ConfigError":
        """Build a ConfigError listing every failing field

        Args:
            error: Pydantic validation error
            title: First line of the message

        Returns:
            ConfigError with one bullet per field error
        """
        errors = []
        for item in error.errors():
            field = ".".join(str(x) for x in item["loc"]) or "<root>"
            errors.append(f"  - {field}: {item['msg']}")
        return cls(f"{title}:\n" + "\n".join(errors))


class InvalidEventError(ReboundError):
    """Malformed replay event"""

    def __init__(self, index: int, reason: str):
        self.index = index
        self.reason = reason
        super().__init__(f"Invalid event at index {index}: {reason}")


class LaunchError(ReboundError):
    """Command could not be started at all"""

    def __init__(self, argv: Sequence[str], reason: str, cause: Optional[BaseException] = None):
        self.argv = list(argv)
        self.reason = reason
        self.cause = cause
        command = " ".join(self.argv) or "<empty>"
        super().__init__(f"Cannot launch command {command}: {reason}")
