"""Configuration validation for the disaster-recovery agent."""

from typing import Any, Dict, List

import jsonschema

from tocrecovery.utils.errors import ConfigurationError, create_error_suggestions

from .schemas import CONFIG_SCHEMA


class ConfigValidationError(ConfigurationError):
    """Raised when configuration validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(
            f"Configuration validation failed: {'; '.join(errors)}",
            suggestions=create_error_suggestions("configuration_invalid"),
        )


class ConfigValidator:
    """Validates agent configuration mappings."""

    def validate_config(self, config: Dict[str, Any]) -> List[str]:
        """
        Validate a merged configuration mapping.

        Args:
            config: Configuration dictionary to validate

        Returns:
            List[str]: List of validation errors (empty if valid)
        """
        errors = []

        validator = jsonschema.Draft7Validator(CONFIG_SCHEMA)
        for error in sorted(validator.iter_errors(config), key=lambda e: list(e.path)):
            location = ".".join(str(part) for part in error.path) or "<root>"
            errors.append(f"{location}: {error.message}")

        if "dialog_text" in config:
            errors.extend(self._validate_dialog_text(config["dialog_text"]))

        return errors

    def _validate_dialog_text(self, text: Any) -> List[str]:
        """Only the ``{minutes}`` placeholder may appear in the dialog text."""
        if not isinstance(text, str):
            return []

        try:
            text.format(minutes=0)
        except (KeyError, IndexError, ValueError) as e:
            return [f"dialog_text: unsupported placeholder ({e})"]

        return []
