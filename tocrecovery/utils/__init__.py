"""Utilities for the disaster-recovery agent."""

from .files import FileManager
from .logging import setup_logging
from .process import ProcessResult, ProcessRunner

__all__ = ["FileManager", "ProcessResult", "ProcessRunner", "setup_logging"]
