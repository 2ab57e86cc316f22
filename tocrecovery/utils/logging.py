"""Logging configuration for the disaster-recovery agent."""

import logging
import os
import sys

import click
from pythonjsonlogger.json import JsonFormatter

LEVEL_COLORS = {
    logging.DEBUG: "blue",
    logging.INFO: "green",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "magenta",
}

# Attributes every LogRecord carries; anything else came in through ``extra=``
_RESERVED_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class ColorFormatter(logging.Formatter):
    """Plain ``level: message key=value`` lines with a colorized level."""

    def format(self, record: logging.LogRecord) -> str:
        level = click.style(record.levelname.lower(), fg=LEVEL_COLORS.get(record.levelno))
        line = f"{level}: {record.getMessage()}"

        context = {key: value for key, value in vars(record).items() if key not in _RESERVED_ATTRS}
        if context:
            line += " " + " ".join(f"{key}={value}" for key, value in context.items())

        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        return line


def _json_formatter() -> JsonFormatter:
    return JsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger",
        },
    )


def setup_logging(log_dir: str = "logs", verbose: bool = False, console: bool = True) -> None:
    """
    Setup logging configuration for the agent.

    Writes JSON lines to ``error.log`` (errors only) and ``combined.log``
    (everything) under ``log_dir``, and colorized text to stdout.

    Args:
        log_dir: Directory for the log files
        verbose: Enable verbose/debug logging
        console: Also log to stdout
    """
    level = logging.DEBUG if verbose else logging.INFO

    os.makedirs(log_dir, exist_ok=True)

    error_handler = logging.FileHandler(os.path.join(log_dir, "error.log"), encoding="utf-8")
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(_json_formatter())

    combined_handler = logging.FileHandler(os.path.join(log_dir, "combined.log"), encoding="utf-8")
    combined_handler.setLevel(level)
    combined_handler.setFormatter(_json_formatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    root_logger.addHandler(error_handler)
    root_logger.addHandler(combined_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(ColorFormatter())
        root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("docker").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
