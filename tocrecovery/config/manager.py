"""Configuration management for the disaster-recovery agent."""

import os
from typing import Any, Dict, Mapping, Optional

import yaml

from tocrecovery.utils.errors import ConfigurationError, create_error_suggestions

from .settings import DEFAULTS, ENV_VARS, INTEGER_OPTIONS, RecoveryConfig
from .validator import ConfigValidationError, ConfigValidator


class ConfigManager:
    """Builds the agent configuration from defaults, a YAML file and the environment."""

    def __init__(self, config_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Optional YAML configuration file
            environ: Environment mapping (defaults to ``os.environ``)
        """
        self.config_path = config_path
        self.environ = os.environ if environ is None else environ
        self.validator = ConfigValidator()

    def load_config(self) -> RecoveryConfig:
        """
        Load, merge and validate configuration.

        Precedence: defaults < YAML file < environment variables.

        Returns:
            RecoveryConfig: Immutable configuration

        Raises:
            ConfigurationError: If the file cannot be parsed or a value is invalid
        """
        config = dict(DEFAULTS)
        config.update(self.load_config_file())
        config.update(self.load_environment())

        errors = self.validator.validate_config(config)
        if errors:
            raise ConfigValidationError(errors)

        config["backup_dir"] = os.path.abspath(os.path.expanduser(config["backup_dir"]))
        return RecoveryConfig(**config)

    def load_config_file(self) -> Dict[str, Any]:
        """
        Load overrides from the YAML configuration file, if one was given.

        Returns:
            Dict[str, Any]: Options found in the file

        Raises:
            ConfigurationError: If the file is missing or not valid YAML
        """
        if not self.config_path:
            return {}

        if not os.path.exists(self.config_path):
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {self.config_path}",
                details=str(e),
                suggestions=create_error_suggestions("configuration_invalid"),
            ) from e

        if not isinstance(config, dict):
            raise ConfigurationError(f"Configuration file {self.config_path} must contain a mapping")

        return config

    def load_environment(self) -> Dict[str, Any]:
        """
        Collect overrides from environment variables.

        Returns:
            Dict[str, Any]: Options set in the environment, integers already parsed

        Raises:
            ConfigurationError: If an integer option holds something else
        """
        overrides = {}

        for option, names in ENV_VARS.items():
            for name in names:
                if name in self.environ:
                    overrides[option] = self._parse_value(option, name, self.environ[name])
                    break

        return overrides

    def _parse_value(self, option: str, name: str, raw: str) -> Any:
        if option not in INTEGER_OPTIONS:
            return raw

        if option == "command_timeout_s" and raw.strip() == "":
            return None

        try:
            return int(raw)
        except ValueError as e:
            raise ConfigurationError(
                f"Environment variable {name} must be an integer, got {raw!r}",
                suggestions=create_error_suggestions("configuration_invalid"),
            ) from e
