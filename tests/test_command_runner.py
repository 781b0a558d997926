"""Tests for command runners"""

import sys

import pytest

from rebound.domain.errors import LaunchError
from rebound.infrastructure.runner.scripted import ScriptedCommandRunner
from rebound.infrastructure.runner.subprocess_runner import SubprocessCommandRunner


class TestSubprocessCommandRunner:
    """Tests for SubprocessCommandRunner"""

    def test_exit_code_zero(self):
        runner = SubprocessCommandRunner()
        assert runner.execute([sys.executable, "-c", "pass"]) == 0

    def test_nonzero_exit_code_is_returned(self):
        runner = SubprocessCommandRunner()
        assert runner.execute([sys.executable, "-c", "import sys; sys.exit(3)"]) == 3

    def test_missing_binary(self):
        runner = SubprocessCommandRunner()
        with pytest.raises(LaunchError, match="definitely-not-a-real-binary"):
            runner.execute(["definitely-not-a-real-binary-xyz"])

    def test_empty_command(self):
        with pytest.raises(LaunchError, match="empty command"):
            SubprocessCommandRunner().execute([])

    def test_cwd(self, tmp_path):
        marker = tmp_path / "marker"
        marker.write_text("x", encoding="utf-8")
        runner = SubprocessCommandRunner(cwd=str(tmp_path))
        code = runner.execute(
            [sys.executable, "-c", "import os, sys; sys.exit(0 if os.path.exists('marker') else 1)"]
        )
        assert code == 0


class TestScriptedCommandRunner:
    """Tests for ScriptedCommandRunner"""

    def test_replays_script_and_repeats_last(self):
        runner = ScriptedCommandRunner([1, 2, 0])
        assert [runner.execute(["x"]) for _ in range(5)] == [1, 2, 0, 0, 0]
        assert runner.call_count == 5
        assert runner.last_call == ["x"]

    def test_raises_scripted_launch_error(self):
        error = LaunchError(["x"], "boom")
        runner = ScriptedCommandRunner([error, 0])
        with pytest.raises(LaunchError, match="boom"):
            runner.execute(["x"])
        assert runner.execute(["x"]) == 0

    def test_empty_script(self):
        with pytest.raises(ValueError):
            ScriptedCommandRunner([])
