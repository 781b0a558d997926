"""Exit code classification - decides whether an attempt succeeded"""

import logging
from typing import Iterable, Optional

from rebound.domain.config.retry import RetryConfig

logger = logging.getLogger(__name__)


class ExitCodeClassifier:
    """Maps an exit code to success/failure.

    Policies in priority order:
    1. ``retry_on``: success iff the code is NOT in the set
    2. ``success_on``: success iff the code is in the set
    3. default: success iff the code is 0
    """

    def __init__(
        self,
        retry_on: Optional[Iterable[int]] = None,
        success_on: Optional[Iterable[int]] = None,
    ):
        self.retry_on = frozenset(retry_on) if retry_on is not None else None
        self.success_on = frozenset(success_on) if success_on is not None else None
        if self.retry_on is not None and self.success_on is not None:
            logger.warning("Both retry_on and success_on given, retry_on takes precedence")

    @classmethod
    def from_config(cls, config: RetryConfig) -> "ExitCodeClassifier":
        return cls(retry_on=config.retry_on, success_on=config.success_on)

    def __call__(self, exit_code: int) -> bool:
        if self.retry_on is not None:
            return exit_code not in self.retry_on
        if self.success_on is not None:
            return exit_code in self.success_on
        return exit_code == 0

    def __repr__(self) -> str:
        if self.retry_on is not None:
            return f"ExitCodeClassifier(retry_on={sorted(self.retry_on)})"
        if self.success_on is not None:
            return f"ExitCodeClassifier(success_on={sorted(self.success_on)})"
        return "ExitCodeClassifier(success_on=[0])"
