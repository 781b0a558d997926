"""Retry models - outcome of one attempt and of a whole retry run"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class RetryOutcome:
    """Result of running (or simulating) the command once"""

    attempt: int
    exit_code: Optional[int]  # None for dry-run attempts and retried launch failures
    classified_success: bool
    launch_error: Optional[str] = None


@dataclass
class RetryResult:
    """Terminal result of RetryExecutor.run"""

    success: bool
    attempts: int
    exit_code: Optional[int] = None  # Exit code of the last attempt
    gave_up: bool = False
    dry_run: bool = False
    delays: List[float] = field(default_factory=list)  # Delays applied (or skipped) between attempts

    @property
    def message(self) -> str:
        """Human-readable summary"""
        if self.success:
            return f"Command succeeded (after {self.attempts} attempt(s))"
        if self.dry_run:
            return (
                f"Command failed (after {self.attempts} attempt(s)); "
                "dry run never succeeds, it only shows the retry cadence"
            )
        return f"Command failed (after {self.attempts} attempt(s))"

    @property
    def total_delay(self) -> float:
        return sum(self.delays)
