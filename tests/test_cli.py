"""Tests for CLI interface"""

from __future__ import annotations

import logging
from unittest.mock import patch

import click
import pytest
from click.testing import CliRunner

from rebound.cli import _die, cli, setup_logging
from rebound.domain.errors import LaunchError
from rebound.infrastructure.config.config_manager import ConfigManager
from rebound.infrastructure.runner.scripted import ScriptedCommandRunner


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ConfigManager.ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)


def invoke(args, script=(0,)):
    """Invoke the CLI with a scripted command runner"""
    scripted = ScriptedCommandRunner(list(script))
    with patch("rebound.cli.SubprocessCommandRunner", return_value=scripted):
        result = CliRunner().invoke(cli, args, obj={})
    return result, scripted


class TestSetupLogging:
    """Tests for setup_logging function"""

    def test_setup_logging_info_level(self):
        """Test that logging is set to INFO level by default"""
        setup_logging(verbose=False)
        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_debug_level(self):
        """Test that logging is set to DEBUG level when verbose"""
        setup_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG


class TestDie:
    """Tests for _die function"""

    def test_die_without_exception(self):
        with pytest.raises(click.ClickException, match="Test error"):
            _die("Test error", verbose=False)

    def test_die_with_exception_verbose(self):
        exc = ValueError("Test exception")
        with pytest.raises(click.ClickException, match="Test error"):
            _die("Test error", verbose=True, exc=exc)


class TestRetryCommand:
    """Tests for retry commands"""

    def test_retry_until_success(self):
        result, scripted = invoke(
            ["retry", "-a", "constant", "--delay", "0", "--", "make", "test"], script=[1, 0]
        )
        assert result.exit_code == 0, result.output
        assert "Command succeeded (after 2 attempt(s))" in result.output
        assert scripted.calls == [["make", "test"], ["make", "test"]]

    def test_retry_gives_up(self):
        result, _ = invoke(
            ["retry", "-a", "constant", "--delay", "1", "--max-attempts", "1", "-D", "--", "false"],
            script=[1],
        )
        assert result.exit_code == 1
        assert "Command failed (after 2 attempt(s))" in result.output

    def test_algorithm_specific_command(self):
        result, scripted = invoke(
            ["retry-constant", "--delay", "0", "--success-on", "0,2", "mycmd", "--flag"], script=[2]
        )
        assert result.exit_code == 0, result.output
        assert scripted.last_call == ["mycmd", "--flag"]

    def test_dry_run(self):
        result, scripted = invoke(
            [
                "retry-exponential",
                "--initial-delay",
                "1",
                "--max-attempts",
                "2",
                "--dry-run",
                "-D",
                "--",
                "deploy",
            ]
        )
        assert result.exit_code == 1
        assert scripted.call_count == 0
        assert "dry run never succeeds" in result.output

    def test_default_algorithm_from_config(self, tmp_path):
        (tmp_path / ".rebound.yml").write_text(
            "backoff:\n  algorithm: lild\n  initial_delay: 0\n  increment: 0\n  decrement: 0\n",
            encoding="utf-8",
        )
        result, _ = invoke(["retry", "--", "cmd"], script=[1, 1, 0])
        assert result.exit_code == 0, result.output
        assert "after 3 attempt(s)" in result.output

    def test_invalid_parameters(self):
        result, scripted = invoke(["retry", "-a", "constant", "--", "cmd"])
        assert result.exit_code == 1
        assert "delay" in result.output
        assert scripted.call_count == 0

    def test_invalid_success_on(self):
        result, _ = invoke(["retry", "-a", "constant", "--delay", "0", "--success-on", "zero", "--", "cmd"])
        assert result.exit_code == 1
        assert "success_on" in result.output

    def test_launch_error(self):
        result, _ = invoke(
            ["retry", "-a", "constant", "--delay", "0", "--", "nope"],
            script=[LaunchError(["nope"], "No such file or directory")],
        )
        assert result.exit_code == 1
        assert "Cannot launch command nope" in result.output

    def test_env_algorithm_with_cli_parameter(self, monkeypatch):
        monkeypatch.setenv("REBOUND_ALGORITHM", "constant")
        result, scripted = invoke(["retry", "--delay", "0", "--", "cmd"], script=[1, 0])
        assert result.exit_code == 0, result.output
        assert scripted.call_count == 2

    def test_config_algorithm_with_cli_parameter(self, tmp_path):
        (tmp_path / ".rebound.yml").write_text("backoff:\n  algorithm: constant\n", encoding="utf-8")
        result, _ = invoke(["retry", "--delay", "0", "--", "cmd"])
        assert result.exit_code == 0, result.output

    def test_no_hidden_delay_ceiling(self):
        result, _ = invoke(
            ["retry-constant", "--delay", "600", "--max-attempts", "2", "--dry-run", "-D", "--", "cmd"]
        )
        assert result.exit_code == 1
        assert "delaying 600 second(s)" in result.output
        assert "after 3 attempt(s)" in result.output

    def test_mistyped_option_is_rejected(self):
        result, scripted = invoke(["retry", "-a", "constant", "--dleay", "3", "--", "cmd"])
        assert result.exit_code == 2
        assert "No such option" in result.output
        assert scripted.call_count == 0

    def test_command_required(self):
        result, _ = invoke(["retry", "-a", "constant", "--delay", "0"])
        assert result.exit_code != 0


class TestShowDelaysCommand:
    """Tests for show-delays command"""

    def test_show_delays(self):
        result, _ = invoke(
            [
                "show-delays",
                "-a",
                "LILD",
                "--initial-delay",
                "1",
                "--increment",
                "1",
                "--decrement",
                "1",
                "0",
                "0:+2",
                "1:+1",
            ]
        )
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[-3:] == ["1", "2", "1"]

    def test_show_delays_give_up(self):
        result, _ = invoke(
            ["show-delays", "-a", "constant", "--delay", "5", "--max-attempts", "2", "0,0,0"]
        )
        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[-3:] == ["5", "5", "-1"]

    def test_invalid_log(self):
        result, _ = invoke(["show-delays", "-a", "constant", "--delay", "1", "0", "7"])
        assert result.exit_code == 1
        assert "Invalid event at index 1" in result.output

    def test_parameter_of_other_algorithm(self):
        result, _ = invoke(
            ["show-delays", "-a", "constant", "--delay", "1", "--increment", "2", "0"]
        )
        assert result.exit_code == 1
        assert "increment" in result.output
