"""BackoffState model - mutable bookkeeping of one backoff engine"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class BackoffState:
    """State of a single logical retry sequence"""

    consecutive_failures: int = 0
    current_delay: Optional[float] = None  # Last clamped, pre-jitter delay
    first_failure_time: Optional[float] = None
    attempt_count: int = 0  # Total failure() calls, never decreases
    last_timestamp: Optional[float] = None  # Time of the previous failure/success
    last_delay: float = 0.0  # Last delay handed to the caller

    @property
    def has_failed(self) -> bool:
        """Check if at least one failure was recorded"""
        return self.first_failure_time is not None
