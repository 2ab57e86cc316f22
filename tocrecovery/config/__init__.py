"""Configuration management for the disaster-recovery agent."""

from .manager import ConfigManager
from .schemas import CONFIG_SCHEMA
from .settings import RecoveryConfig
from .validator import ConfigValidationError, ConfigValidator

__all__ = ["CONFIG_SCHEMA", "ConfigManager", "ConfigValidationError", "ConfigValidator", "RecoveryConfig"]
