"""Scripted command runner for testing and prototyping"""

from typing import List, Optional, Sequence, Union

from rebound.domain.errors import LaunchError
from rebound.infrastructure.runner.base import CommandRunner


class ScriptedCommandRunner(CommandRunner):
    """Returns predefined exit codes instead of running anything

    Each entry of ``script`` is consumed by one call; an entry that is an
    exception instance is raised instead. The last entry repeats forever.
    """

    def __init__(self, script: Sequence[Union[int, LaunchError]] = (0,)):
        if not script:
            raise ValueError("script must contain at least one exit code")
        self.script = list(script)
        self.calls: List[List[str]] = []

    def execute(self, argv: Sequence[str]) -> int:
        self.calls.append(list(argv))
        index = min(len(self.calls), len(self.script)) - 1
        entry = self.script[index]
        if isinstance(entry, LaunchError):
            raise entry
        return entry

    @property
    def call_count(self) -> int:
        return len(self.calls)

    @property
    def last_call(self) -> Optional[List[str]]:
        return self.calls[-1] if self.calls else None
