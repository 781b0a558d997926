"""Configuration manager for loading and validating .rebound.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from rebound.domain.config import COMMON_FIELDS, AppConfig, BackoffConfig, RetryConfig
from rebound.domain.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".rebound.yml"


class ConfigManager:
    """Manages configuration from .rebound.yml and environment variables

    Loads configuration with validation using Pydantic models. Configuration priority:
    1. Default values (DEFAULT_CONFIG)
    2. .rebound.yml file (searched from current directory upwards)
    3. Environment variables (REBOUND_*)
    4. CLI arguments (apply_overrides)
    """

    DEFAULT_CONFIG = {
        "backoff": {
            "algorithm": "exponential",
            "initial_delay": 1.0,
            "exponent_base": 2.0,
        },
        "retry": {
            "retry_on": None,
            "success_on": None,
            "dry_run": False,
            "skip_delay": False,
            "launch_error_policy": "raise",
        },
    }

    ENV_OVERRIDES = {
        "REBOUND_ALGORITHM": "algorithm",
        "REBOUND_MAX_ATTEMPTS": "max_attempts",
        "REBOUND_MAX_DELAY": "max_delay",
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Validation is deferred until the configuration is first read, so CLI
        overrides can still supply parameters the file or environment lacks.

        Args:
            config_path: Path to .rebound.yml (searches from current dir if None)

        Raises:
            ConfigError: If the config file is not a mapping
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        self.raw_config = self._load_raw_config()
        self._config: Optional[AppConfig] = None

    @property
    def config(self) -> AppConfig:
        """Validated configuration

        Raises:
            ConfigError: If configuration validation fails
        """
        if self._config is None:
            self._config = self._validate(self.raw_config)
        return self._config

    def _find_config_file(self) -> Optional[Path]:
        """Find .rebound.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_raw_config(self) -> Dict[str, Any]:
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                logger.info("Using default configuration")
            else:
                if not isinstance(file_config, dict):
                    raise ConfigError(f"{self.config_path}: top level must be a mapping")
                file_backoff = file_config.get("backoff")
                if isinstance(file_backoff, dict):
                    config_dict["backoff"] = self._merge_backoff(
                        config_dict["backoff"], file_backoff
                    )
                    file_config = {k: v for k, v in file_config.items() if k != "backoff"}
                config_dict = self._merge_config(config_dict, file_config)
                logger.info(f"Loaded configuration from {self.config_path}")

        return self._apply_env_overrides(config_dict)

    def _validate(self, config_dict: Dict[str, Any]) -> AppConfig:
        try:
            return AppConfig(**config_dict)
        except ValidationError as e:
            raise ConfigError.from_validation_error(e, "Configuration validation failed") from e

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries

        Args:
            base: Base configuration
            override: Override configuration

        Returns:
            Merged configuration
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _merge_backoff(self, base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge backoff parameters, dropping algorithm-specific ones on algorithm change

        Args:
            base: Current backoff parameters
            override: New parameters (None values are ignored)

        Returns:
            Merged backoff parameters
        """
        override = {k: v for k, v in override.items() if v is not None}
        new_algorithm = override.get("algorithm")
        if new_algorithm and str(new_algorithm).lower() != str(base.get("algorithm", "")).lower():
            base = {k: v for k, v in base.items() if k in COMMON_FIELDS}
        result = dict(base)
        result.update(override)
        if "algorithm" in result:
            result["algorithm"] = str(result["algorithm"]).lower()
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with env overrides applied
        """
        overrides = {}
        for env_name, key in self.ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                overrides[key] = value
        if overrides:
            logger.debug(f"Environment overrides: {overrides}")
            config["backoff"] = self._merge_backoff(config["backoff"], overrides)
        return config

    def apply_overrides(
        self,
        backoff: Optional[Mapping[str, Any]] = None,
        retry: Optional[Mapping[str, Any]] = None,
    ) -> AppConfig:
        """Apply CLI overrides on top of the loaded configuration

        Args:
            backoff: Backoff parameters (None values are ignored)
            retry: Retry parameters (None values are ignored)

        Returns:
            Validated configuration with overrides applied

        Raises:
            ConfigError: If the resulting configuration is invalid
        """
        config_dict = copy.deepcopy(self.raw_config)
        if backoff:
            config_dict["backoff"] = self._merge_backoff(config_dict["backoff"], backoff)
        if retry:
            config_dict["retry"].update({k: v for k, v in retry.items() if v is not None})
        self._config = self._validate(config_dict)
        self.raw_config = config_dict
        return self._config

    def get_backoff_config(self) -> BackoffConfig:
        """Get backoff configuration

        Returns:
            Config model of the selected algorithm
        """
        return self.config.backoff

    def get_retry_config(self) -> RetryConfig:
        """Get retry configuration

        Returns:
            Retry configuration model
        """
        return self.config.retry

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "backoff.max_delay" or "retry")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self.config.model_dump()
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
