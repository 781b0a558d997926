"""Base command runner interface"""

from abc import ABC, abstractmethod
from typing import Sequence


class CommandRunner(ABC):
    """Abstract base class for command runners"""

    @abstractmethod
    def execute(self, argv: Sequence[str]) -> int:
        """Run a command and wait for it

        Args:
            argv: Program and arguments

        Returns:
            Exit code (negative if the process was killed by a signal)

        Raises:
            LaunchError: If the command could not be started
        """
