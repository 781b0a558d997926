"""Tests for ConfigManager"""

import pytest
import yaml

from rebound.domain.errors import ConfigError
from rebound.infrastructure.config.config_manager import ConfigManager


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run from an empty directory with no REBOUND_* variables"""
    monkeypatch.chdir(tmp_path)
    for name in ConfigManager.ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)


def write_config(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestConfigManagerLoading:
    """Tests for loading configuration"""

    def test_defaults(self):
        manager = ConfigManager()
        assert manager.config_path is None
        backoff = manager.get_backoff_config()
        assert backoff.algorithm == "exponential"
        assert backoff.max_attempts == 0
        assert backoff.max_delay is None
        assert manager.get_retry_config().dry_run is False

    def test_finds_config_in_cwd(self, tmp_path):
        write_config(tmp_path / ".rebound.yml", {"retry": {"success_on": "0,2"}})
        manager = ConfigManager()
        assert manager.config_path.resolve() == (tmp_path / ".rebound.yml").resolve()
        assert manager.get_retry_config().success_on == [0, 2]

    def test_finds_config_in_parent(self, tmp_path, monkeypatch):
        write_config(tmp_path / ".rebound.yml", {"retry": {"skip_delay": True}})
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        monkeypatch.chdir(child)
        assert ConfigManager().get_retry_config().skip_delay is True

    def test_same_algorithm_merges_parameters(self, tmp_path):
        path = write_config(tmp_path / "cfg.yml", {"backoff": {"initial_delay": 3}})
        backoff = ConfigManager(path).get_backoff_config()
        assert backoff.algorithm == "exponential"
        assert backoff.initial_delay == 3
        assert backoff.exponent_base == 2

    def test_switching_algorithm_keeps_common_parameters(self, tmp_path):
        path = write_config(
            tmp_path / "cfg.yml",
            {"backoff": {"algorithm": "Constant", "delay": 3, "max_attempts": 4}},
        )
        backoff = ConfigManager(str(path)).get_backoff_config()
        assert backoff.algorithm == "constant"
        assert backoff.delay == 3
        assert backoff.max_attempts == 4
        assert backoff.max_delay is None

    def test_invalid_values(self, tmp_path):
        path = write_config(tmp_path / "cfg.yml", {"backoff": {"jitter_factor": 5}})
        with pytest.raises(ConfigError, match="jitter_factor"):
            ConfigManager(path).get_backoff_config()

    def test_unknown_section(self, tmp_path):
        path = write_config(tmp_path / "cfg.yml", {"llm": {"provider": "mock"}})
        with pytest.raises(ConfigError, match="llm"):
            ConfigManager(path).get_retry_config()

    def test_unparseable_file_falls_back_to_defaults(self, tmp_path, caplog):
        path = tmp_path / "cfg.yml"
        path.write_text("backoff: [unclosed", encoding="utf-8")
        manager = ConfigManager(path)
        assert manager.get_backoff_config().algorithm == "exponential"
        assert "Failed to load config" in caplog.text

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "cfg.yml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            ConfigManager(path)


class TestConfigManagerOverrides:
    """Tests for environment and CLI overrides"""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("REBOUND_MAX_ATTEMPTS", "7")
        monkeypatch.setenv("REBOUND_MAX_DELAY", "30")
        backoff = ConfigManager().get_backoff_config()
        assert backoff.max_attempts == 7
        assert backoff.max_delay == 30

    def test_env_algorithm_completed_by_cli(self, monkeypatch):
        monkeypatch.setenv("REBOUND_ALGORITHM", "constant")
        manager = ConfigManager()
        config = manager.apply_overrides(backoff={"delay": 5})
        assert config.backoff.algorithm == "constant"
        assert config.backoff.delay == 5
        assert manager.get_backoff_config().delay == 5

    def test_env_algorithm_without_its_parameters(self, monkeypatch):
        monkeypatch.setenv("REBOUND_ALGORITHM", "constant")
        manager = ConfigManager()
        with pytest.raises(ConfigError, match="delay"):
            manager.get_backoff_config()

    def test_file_algorithm_completed_by_cli(self, tmp_path):
        path = write_config(tmp_path / "cfg.yml", {"backoff": {"algorithm": "fibonacci"}})
        config = ConfigManager(path).apply_overrides(backoff={"initial_delay": 2})
        assert config.backoff.algorithm == "fibonacci"
        assert config.backoff.initial_delay == 2

    def test_no_hidden_budget_after_switch(self):
        config = ConfigManager().apply_overrides(backoff={"algorithm": "constant", "delay": 600})
        assert config.backoff.delay == 600
        assert config.backoff.max_delay is None
        assert config.backoff.max_attempts == 0

    def test_failed_override_keeps_previous_config(self):
        manager = ConfigManager()
        with pytest.raises(ConfigError):
            manager.apply_overrides(backoff={"algorithm": "constant"})
        assert manager.get_backoff_config().algorithm == "exponential"

    def test_cli_overrides(self):
        manager = ConfigManager()
        config = manager.apply_overrides(
            backoff={
                "algorithm": "lild",
                "initial_delay": 1,
                "increment": 1,
                "decrement": 1,
                "max_delay": None,
            },
            retry={"dry_run": True, "success_on": None},
        )
        assert config.backoff.algorithm == "lild"
        assert config.backoff.max_delay is None
        assert config.backoff.max_attempts == 0
        assert config.retry.dry_run is True
        assert manager.get("backoff.algorithm") == "lild"
        assert manager.get("backoff.nope", "fallback") == "fallback"

    def test_invalid_cli_override(self):
        with pytest.raises(ConfigError, match="delay"):
            ConfigManager().apply_overrides(backoff={"algorithm": "constant"})
