"""Error handling utilities for the disaster-recovery agent."""

import sys
import traceback
from typing import Optional

import click


class RecoveryError(Exception):
    """Base exception for disaster-recovery agent errors."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        suggestions: Optional[list] = None,
    ):
        self.message = message
        self.details = details
        self.suggestions = suggestions or []
        super().__init__(message)


class ConfigurationError(RecoveryError):
    """Raised when configuration is invalid or cannot be parsed."""

    pass


class BootstrapFailed(RecoveryError):
    """Raised when the backup directory cannot be prepared at startup."""

    pass


class ProbeError(RecoveryError):
    """Raised when the recent-sales check cannot be performed."""

    pass


class DialogUnavailable(RecoveryError):
    """Raised when the operator dialog cannot be shown."""

    pass


class CaptureFailed(RecoveryError):
    """Raised when a database dump could not be captured or written."""

    pass


class CatalogUnavailable(RecoveryError):
    """Raised when the snapshot catalog cannot be read or written."""

    pass


class NoSnapshotAvailable(RecoveryError):
    """Raised when a restore is requested but no restorable snapshot exists."""

    pass


class RestoreAborted(RecoveryError):
    """Raised when the database container could not be stopped before a restore."""

    pass


class RestoreFailed(RecoveryError):
    """Raised when the restore itself failed. The database container stays stopped."""

    pass


class ProcessError(RecoveryError):
    """Base class for external command failures."""

    def __init__(self, message: str, command: Optional[list] = None, **kwargs):
        self.command = list(command or [])
        super().__init__(message, **kwargs)


class SpawnError(ProcessError):
    """Raised when an external command could not be launched."""

    pass


class NonZeroExit(ProcessError):
    """Raised when an external command exits with a non-zero status."""

    def __init__(self, message: str, returncode: int, stderr_tail: str = "", **kwargs):
        self.returncode = returncode
        self.stderr_tail = stderr_tail
        super().__init__(message, details=stderr_tail or None, **kwargs)


class TimeoutExceeded(ProcessError):
    """Raised when an external command exceeds its timeout and is killed."""

    pass


class ErrorHandler:
    """Handles and formats fatal errors for user-friendly display."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def handle_error(self, error: RecoveryError, context: Optional[str] = None) -> None:
        """
        Display an agent error with its details and suggestions.

        Args:
            error: Error to display
            context: Optional context about when/where error occurred
        """
        click.echo(f"✗ {error.message}", err=True)

        if context:
            click.echo(f"Context: {context}", err=True)

        if error.details:
            click.echo(f"Details: {error.details}", err=True)

        if error.suggestions:
            click.echo("\nSuggestions:", err=True)
            for suggestion in error.suggestions:
                click.echo(f"  • {suggestion}", err=True)

        if self.verbose:
            click.echo("\nFull traceback:", err=True)
            traceback.print_exc()

    def exit_with_error(self, error: RecoveryError, context: Optional[str] = None, exit_code: int = 1) -> None:
        """Handle error and exit with specified code."""
        self.handle_error(error, context)
        sys.exit(exit_code)


def create_error_suggestions(error_type: str, **kwargs) -> list:
    """
    Create contextual error suggestions based on error type and context.

    Args:
        error_type: Type of error
        **kwargs: Additional context information (``path``, ``container``)

    Returns:
        list: List of suggestion strings
    """
    path = kwargs.get("path", "the backup directory")
    container = kwargs.get("container", "the database container")

    suggestions = {
        "backup_dir_unwritable": [
            f"Check that the agent user can write to {path}",
            "Set BACKUP_DIR to a writable location",
        ],
        "log_dir_unwritable": [
            f"Check that the agent user can write to {path}",
            "Pass --log-dir or set LOG_DIR to a writable location",
        ],
        "database_unreachable": [
            f"Check that {container} is running",
            "Verify MONGO_URI points at the point-of-sale database",
        ],
        "docker_not_running": [
            "Start the Docker daemon",
            "Verify Docker permissions for the agent user",
        ],
        "restore_failed": [
            f"{container} was left stopped; inspect it before starting it again",
            "Mark the snapshot as failed in the backups collection if it is unusable",
        ],
        "configuration_invalid": [
            "Check YAML syntax in the configuration file",
            "Check that numeric environment variables hold integers",
        ],
    }

    return suggestions.get(error_type, [])
