"""Snapshot capture and restore for the point-of-sale database."""

import logging
import os
import time
from datetime import datetime
from typing import Callable, Optional

from tocrecovery.config.settings import RecoveryConfig
from tocrecovery.containers.runtime import ContainerRuntime
from tocrecovery.utils.errors import (
    CaptureFailed,
    CatalogUnavailable,
    NoSnapshotAvailable,
    ProcessError,
    RestoreAborted,
    RestoreFailed,
    create_error_suggestions,
)
from tocrecovery.utils.files import FileManager

from .catalog import CatalogStore, SnapshotRecord, SnapshotStatus

logger = logging.getLogger(__name__)

DATA_MOUNT_PATH = "/data/db"
BACKUP_MOUNT_PATH = "/backups"
TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


def local_now() -> datetime:
    """Current wall-clock time as an aware datetime in the local zone."""
    return datetime.now().astimezone()


def snapshot_filename(moment: datetime) -> str:
    return f"backup-{moment.strftime(TIMESTAMP_FORMAT)}.gz"


class SnapshotEngine:
    """Captures database dumps to the backup directory and restores them."""

    def __init__(
        self,
        config: RecoveryConfig,
        catalog: CatalogStore,
        runtime: ContainerRuntime,
        file_manager: Optional[FileManager] = None,
        clock: Callable[[], datetime] = local_now,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.catalog = catalog
        self.runtime = runtime
        self.file_manager = file_manager or FileManager()
        self.clock = clock
        self.sleep = sleep

    def capture(self) -> str:
        """
        Dump the database into a new archive and register it in the catalog.

        Returns:
            str: Path of the new archive

        Raises:
            CaptureFailed: If the dump or the file write failed; no record is written
            CatalogUnavailable: If the archive was written but could not be registered
        """
        now = self.clock()
        filename = snapshot_filename(now)
        path = os.path.join(self.config.backup_dir, filename)

        logger.info(f"Starting backup: {path}", extra={"path": path})

        try:
            dump = self.runtime.exec_capture(
                self.config.container_name,
                ["mongodump", f"--uri={self.config.mongo_uri}", "--archive", "--gzip"],
            )
        except ProcessError as e:
            raise CaptureFailed(f"Database dump failed: {e.message}", details=e.details) from e

        try:
            self.file_manager.write_atomically(path, dump)
        except OSError as e:
            # Any partial file stays on disk for inspection
            raise CaptureFailed(f"Could not write backup file {path}", details=str(e)) from e

        record = SnapshotRecord(
            filename=filename,
            path=path,
            created_at=now,
            size_mb=self.file_manager.file_size_mb(path),
            status=SnapshotStatus.CREATED,
        )

        try:
            self.catalog.insert(record)
        except CatalogUnavailable:
            logger.error("Backup written but not registered in the catalog", extra={"path": path})
            raise

        logger.info(f"Backup successful: {record.size_mb}MB", extra={"path": path, "size_mb": record.size_mb})
        return path

    def restore(self) -> SnapshotRecord:
        """
        Roll the database back to the newest ``created`` snapshot.

        The database container is stopped for the duration of the restore.

        Returns:
            SnapshotRecord: The restored record, now in ``restored`` status

        Raises:
            NoSnapshotAvailable: If the catalog holds no restorable snapshot
            RestoreAborted: If the container could not be stopped; nothing was changed
            RestoreFailed: If the restore or the restart failed; the container stays stopped
            CatalogUnavailable: If the catalog could not be read or updated
        """
        target = self.catalog.latest_created()
        if target is None:
            raise NoSnapshotAvailable("No backups available to restore")

        container = self.config.container_name
        logger.info(f"Starting restore from: {target.filename}", extra={"snapshot_id": str(target.id)})

        try:
            self.runtime.stop(container)
        except ProcessError as e:
            raise RestoreAborted(
                f"Could not stop container {container}; restore not attempted",
                details=e.details or e.message,
            ) from e

        # Let the container release its data volume
        self.sleep(self.config.quiescence_delay_s)

        try:
            self.runtime.run_oneshot(
                self.config.database_image,
                [
                    (self.config.data_volume_name, DATA_MOUNT_PATH),
                    (self.config.backup_dir, BACKUP_MOUNT_PATH),
                ],
                [
                    "mongorestore",
                    f"--uri={self.config.mongo_uri}",
                    "--gzip",
                    f"--archive={BACKUP_MOUNT_PATH}/{target.filename}",
                ],
            )
        except ProcessError as e:
            raise RestoreFailed(
                f"Restore of {target.filename} failed; container {container} left stopped",
                details=e.details or e.message,
                suggestions=create_error_suggestions("restore_failed", container=container),
            ) from e

        try:
            self.runtime.start(container)
        except ProcessError as e:
            raise RestoreFailed(
                f"Restore of {target.filename} finished but container {container} did not start",
                details=e.details or e.message,
                suggestions=create_error_suggestions("restore_failed", container=container),
            ) from e

        # The catalog lives in the database the container serves
        self.catalog.set_status(target.id, SnapshotStatus.RESTORED)
        target.status = SnapshotStatus.RESTORED

        logger.info("Restore completed successfully", extra={"snapshot_id": str(target.id)})
        return target
