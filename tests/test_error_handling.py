"""Tests for error handling system."""

from unittest.mock import patch

import click
from click.testing import CliRunner

from tocrecovery.utils.errors import (
    BootstrapFailed,
    CaptureFailed,
    ConfigurationError,
    ErrorHandler,
    NonZeroExit,
    ProcessError,
    RecoveryError,
    RestoreFailed,
    SpawnError,
    create_error_suggestions,
)


class TestRecoveryError:
    """Test custom error classes."""

    def test_recovery_error_basic(self):
        """Test basic RecoveryError functionality."""
        error = RecoveryError("Test error message")

        assert str(error) == "Test error message"
        assert error.message == "Test error message"
        assert error.details is None
        assert error.suggestions == []

    def test_recovery_error_with_details(self):
        """Test RecoveryError with details and suggestions."""
        suggestions = ["Try this", "Or try that"]
        error = RecoveryError("Test error", details="Detailed explanation", suggestions=suggestions)

        assert error.message == "Test error"
        assert error.details == "Detailed explanation"
        assert error.suggestions == suggestions

    def test_error_inheritance(self):
        """Test that the taxonomy shares one base class."""
        for error_class in (BootstrapFailed, CaptureFailed, ConfigurationError, RestoreFailed, SpawnError):
            assert issubclass(error_class, RecoveryError)

        assert issubclass(NonZeroExit, ProcessError)

    def test_non_zero_exit_carries_code_and_stderr(self):
        """Test NonZeroExit exposes the exit status and stderr tail."""
        error = NonZeroExit(
            "mongodump exited with code 2",
            returncode=2,
            stderr_tail="connection refused",
            command=["docker", "exec", "mongodb", "mongodump"],
        )

        assert error.returncode == 2
        assert error.stderr_tail == "connection refused"
        assert error.details == "connection refused"
        assert error.command[0] == "docker"


class TestErrorHandler:
    """Test error handler functionality."""

    def setup_method(self):
        """Setup test environment."""
        self.handler = ErrorHandler(verbose=False)
        self.verbose_handler = ErrorHandler(verbose=True)

    def test_handle_recovery_error(self):
        """Test handling agent-specific errors."""
        error = BootstrapFailed(
            "Could not create backup directory",
            details="Permission denied",
            suggestions=["Set BACKUP_DIR"],
        )

        with patch("click.echo") as mock_echo:
            self.handler.handle_error(error, context="startup")

            assert mock_echo.call_count >= 4  # Error, context, details, suggestions

            error_calls = [call for call in mock_echo.call_args_list if "✗" in str(call)]
            assert len(error_calls) > 0

    def test_handle_error_without_details(self):
        """Test only the message is printed when nothing else is known."""
        error = ConfigurationError("Configuration file not found: agent.yml")

        with patch("click.echo") as mock_echo:
            self.handler.handle_error(error)

            assert mock_echo.call_count == 1
            assert "Configuration file not found" in str(mock_echo.call_args_list[0])

    def test_handle_error_with_verbose(self):
        """Test error handling with verbose output."""
        error = RecoveryError("Test error")

        with patch("click.echo"):
            with patch("traceback.print_exc") as mock_traceback:
                self.verbose_handler.handle_error(error)

                mock_traceback.assert_called_once()

    def test_exit_with_error(self):
        """Test exit_with_error functionality."""
        error = RecoveryError("Fatal error")

        with patch("click.echo"):
            with patch("sys.exit") as mock_exit:
                self.handler.exit_with_error(error)

                mock_exit.assert_called_once_with(1)


class TestErrorUtilities:
    """Test error utility functions."""

    def test_create_error_suggestions_docker(self):
        """Test Docker error suggestions."""
        suggestions = create_error_suggestions("docker_not_running")

        assert len(suggestions) > 0
        assert any("Docker" in suggestion for suggestion in suggestions)

    def test_create_error_suggestions_with_context(self):
        """Test suggestions mention the given path and container."""
        assert any("/srv/backups" in s for s in create_error_suggestions("backup_dir_unwritable", path="/srv/backups"))
        assert any("mongodb" in s for s in create_error_suggestions("restore_failed", container="mongodb"))
        assert any("/var/log/tocrecovery" in s for s in create_error_suggestions("log_dir_unwritable", path="/var/log/tocrecovery"))

    def test_create_error_suggestions_unknown(self):
        """Test suggestions for unknown error type."""
        assert create_error_suggestions("unknown_error_type") == []


class TestClickIntegration:
    """Test error handling integration with Click commands."""

    def test_cli_error_handling(self):
        """Test error handling in Click command context."""

        @click.command()
        def test_command():
            ErrorHandler().exit_with_error(ConfigurationError("Test config error"))

        runner = CliRunner()
        result = runner.invoke(test_command)

        assert result.exit_code == 1
        assert "Test config error" in result.output
