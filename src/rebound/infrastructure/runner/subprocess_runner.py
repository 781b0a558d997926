"""Command runner backed by subprocess"""

import logging
import shlex
import subprocess
from typing import Optional, Sequence

from rebound.domain.errors import LaunchError
from rebound.infrastructure.runner.base import CommandRunner

logger = logging.getLogger(__name__)


class SubprocessCommandRunner(CommandRunner):
    """Runs the command directly (no shell), inheriting stdio"""

    def __init__(self, cwd: Optional[str] = None):
        """Initialize runner

        Args:
            cwd: Working directory for the command (default: current)
        """
        self.cwd = cwd

    def execute(self, argv: Sequence[str]) -> int:
        argv = list(argv)
        if not argv:
            raise LaunchError(argv, "empty command")

        logger.debug(f"Running: {shlex.join(argv)}")
        try:
            completed = subprocess.run(argv, cwd=self.cwd, check=False)
        except OSError as e:
            raise LaunchError(argv, e.strerror or str(e), cause=e) from e

        # Negative for signal termination, exit status otherwise
        return completed.returncode
