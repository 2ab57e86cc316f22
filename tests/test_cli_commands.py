"""Test CLI entry point."""

from unittest.mock import patch

from click.testing import CliRunner

from tocrecovery.cli import cli
from tocrecovery.utils.errors import BootstrapFailed


class TestCLICommands:
    """Test CLI command functionality."""

    def setup_method(self):
        """Setup test environment."""
        self.runner = CliRunner()

    def test_cli_version(self):
        """Test CLI version display."""
        result = self.runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "version" in result.output.lower()

    def test_cli_help(self):
        """Test CLI help display."""
        result = self.runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Disaster-recovery monitor" in result.output
        assert "--config" in result.output

    @patch("tocrecovery.cli.setup_logging")
    @patch("tocrecovery.cli.RecoveryAgent")
    def test_runs_agent(self, mock_agent_class, mock_setup_logging):
        """Test the agent is prepared, checked and run."""
        result = self.runner.invoke(cli, ["--verbose"], env={"CHECK_INTERVAL": "60000"})

        assert result.exit_code == 0
        config = mock_agent_class.call_args[0][0]
        assert config.check_interval_ms == 60000
        mock_setup_logging.assert_called_once_with(log_dir="logs", verbose=True)
        mock_agent_class.return_value.preflight.assert_called_once_with()
        mock_agent_class.return_value.run.assert_called_once_with()

    @patch("tocrecovery.cli.setup_logging")
    @patch("tocrecovery.cli.RecoveryAgent")
    def test_log_dir_option(self, mock_agent_class, mock_setup_logging):
        """Test --log-dir overrides the configured directory."""
        result = self.runner.invoke(cli, ["--log-dir", "/var/log/tocrecovery"])

        assert result.exit_code == 0
        mock_setup_logging.assert_called_once_with(log_dir="/var/log/tocrecovery", verbose=False)

    @patch("tocrecovery.cli.setup_logging")
    @patch("tocrecovery.cli.RecoveryAgent")
    def test_config_file(self, mock_agent_class, mock_setup_logging):
        """Test options are read from the YAML file."""
        with self.runner.isolated_filesystem():
            with open("agent.yml", "w") as f:
                f.write("container_name: tocgame-mongo\n")

            result = self.runner.invoke(cli, ["--config", "agent.yml"], env={"CONTAINER_NAME": None})

        assert result.exit_code == 0
        assert mock_agent_class.call_args[0][0].container_name == "tocgame-mongo"

    @patch("tocrecovery.cli.RecoveryAgent")
    def test_invalid_configuration_exits(self, mock_agent_class):
        """Test configuration errors stop the agent before it starts."""
        result = self.runner.invoke(cli, [], env={"CHECK_INTERVAL": "five minutes"})

        assert result.exit_code == 1
        assert "CHECK_INTERVAL" in result.output
        mock_agent_class.assert_not_called()

    @patch("tocrecovery.cli.setup_logging")
    @patch("tocrecovery.cli.RecoveryAgent")
    def test_unwritable_log_dir_exits(self, mock_agent_class, mock_setup_logging):
        """Test a log directory that cannot be created is fatal."""
        mock_setup_logging.side_effect = PermissionError(13, "Permission denied", "/var/log/tocrecovery")

        result = self.runner.invoke(cli, ["--log-dir", "/var/log/tocrecovery"])

        assert result.exit_code == 1
        assert "Could not open log directory /var/log/tocrecovery" in result.output
        assert "Permission denied" in result.output
        mock_agent_class.assert_not_called()

    @patch("tocrecovery.cli.setup_logging")
    @patch("tocrecovery.cli.RecoveryAgent")
    def test_bootstrap_failure_exits(self, mock_agent_class, mock_setup_logging):
        """Test an unusable backup directory is fatal."""
        mock_agent_class.side_effect = BootstrapFailed(
            "Could not create backup directory /backups", details="Permission denied"
        )

        result = self.runner.invoke(cli, [])

        assert result.exit_code == 1
        assert "Could not create backup directory" in result.output
        assert "Permission denied" in result.output
