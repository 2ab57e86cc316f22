"""Command-line entry point for the disaster-recovery agent.

The agent has no subcommands: it loads its configuration, prepares the backup
directory and runs the monitoring loop until the service manager stops it.
"""

import logging
from typing import Optional

import click

from tocrecovery import __version__
from tocrecovery.agent import RecoveryAgent
from tocrecovery.config.manager import ConfigManager
from tocrecovery.utils.errors import BootstrapFailed, ConfigurationError, ErrorHandler, create_error_suggestions
from tocrecovery.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="YAML configuration file (environment variables take precedence)",
)
@click.option("--log-dir", help="Directory for error.log and combined.log")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def cli(config_path: Optional[str], log_dir: Optional[str], verbose: bool) -> None:
    """Disaster-recovery monitor for the point-of-sale database.

    Watches the sales collection and, when no sale was recorded during the last
    check interval, asks the operator whether something is wrong. "Yes" restores
    the latest backup; "No" takes a preventive backup.
    """
    error_handler = ErrorHandler(verbose=verbose)

    try:
        config = ConfigManager(config_path).load_config()
    except ConfigurationError as e:
        error_handler.exit_with_error(e, context="loading configuration")
        return

    log_dir = log_dir or config.log_dir
    try:
        setup_logging(log_dir=log_dir, verbose=verbose)
    except OSError as e:
        error = BootstrapFailed(
            f"Could not open log directory {log_dir}",
            details=str(e),
            suggestions=create_error_suggestions("log_dir_unwritable", path=log_dir),
        )
        error_handler.exit_with_error(error, context="setting up logging")
        return

    try:
        agent = RecoveryAgent(config)
    except BootstrapFailed as e:
        logger.critical(f"Critical error: {e.message}", extra={"details": e.details})
        error_handler.exit_with_error(e, context="preparing backup directory")
        return

    agent.preflight()
    agent.run()


if __name__ == "__main__":
    cli()
