"""Command runners"""

from rebound.infrastructure.runner.base import CommandRunner
from rebound.infrastructure.runner.scripted import ScriptedCommandRunner
from rebound.infrastructure.runner.subprocess_runner import SubprocessCommandRunner

__all__ = ["CommandRunner", "ScriptedCommandRunner", "SubprocessCommandRunner"]
