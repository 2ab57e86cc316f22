"""File operations utilities for the disaster-recovery agent."""

import logging
import os

from .errors import BootstrapFailed, create_error_suggestions

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


class FileManager:
    """Manages file operations for snapshots and their directory."""

    def ensure_directory(self, path: str, mode: int = 0o755) -> bool:
        """
        Ensure a directory exists, creating it recursively if missing.

        An existing directory is left as it is (contents and mode).

        Args:
            path: Directory path
            mode: Mode for newly created directories

        Returns:
            bool: True if the directory was created, False if it already existed

        Raises:
            BootstrapFailed: If the directory could not be created
        """
        if os.path.isdir(path):
            return False

        try:
            os.makedirs(path, mode=mode, exist_ok=True)
            # makedirs applies the umask; the leaf gets the agreed mode explicitly
            os.chmod(path, mode)
        except OSError as e:
            logger.error("Error creating backup directory", extra={"path": path, "error": str(e)})
            raise BootstrapFailed(
                f"Could not create backup directory {path}",
                details=str(e),
                suggestions=create_error_suggestions("backup_dir_unwritable", path=path),
            ) from e

        logger.info(f"Backup directory created: {path}", extra={"path": path})
        return True

    def write_atomically(self, path: str, data: bytes) -> str:
        """
        Write bytes to a temporary sibling, fsync it and rename it into place.

        A failure leaves the ``.part`` sibling on disk.

        Args:
            path: Final file path
            data: File contents

        Returns:
            str: Final file path
        """
        partial_path = f"{path}.part"

        with open(partial_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())

        os.replace(partial_path, path)
        return path

    def file_size_mb(self, path: str) -> int:
        """Whole megabytes of a file, rounded down; 0 if it cannot be measured."""
        try:
            return os.stat(path).st_size // BYTES_PER_MB
        except OSError:
            logger.warning("Could not measure snapshot size", extra={"path": path})
            return 0
