"""Wiring of the disaster-recovery agent components."""

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from docker.errors import DockerException
from pymongo import MongoClient

from tocrecovery.backup.catalog import CatalogStore, SnapshotStatus
from tocrecovery.backup.engine import SnapshotEngine, local_now
from tocrecovery.config.settings import RecoveryConfig
from tocrecovery.containers.runtime import ContainerRuntime
from tocrecovery.monitoring.activity import ActivityProbe
from tocrecovery.monitoring.dialog import DialogGate
from tocrecovery.monitoring.loop import ControlLoop
from tocrecovery.utils.errors import CatalogUnavailable, create_error_suggestions
from tocrecovery.utils.files import FileManager
from tocrecovery.utils.process import ProcessRunner

logger = logging.getLogger(__name__)

BACKUP_DIR_MODE = 0o755


class RecoveryAgent:
    """Disaster-recovery agent for the point-of-sale database."""

    def __init__(
        self,
        config: RecoveryConfig,
        runner: Optional[ProcessRunner] = None,
        client_factory: Callable[[str], Any] = MongoClient,
        clock: Callable[[], datetime] = local_now,
        sleep: Optional[Callable[[float], None]] = None,
        runtime: Optional[ContainerRuntime] = None,
    ):
        """
        Initialize the agent and prepare the backup directory.

        Args:
            config: Agent configuration
            runner: Process runner shared by the dialog and container calls
            client_factory: Callable returning a MongoDB client for a URI
            clock: Wall clock used for snapshot names and the activity window
            sleep: Sleep function used between ticks and during restores
            runtime: Container runtime (built from ``runner`` if omitted)

        Raises:
            BootstrapFailed: If the backup directory cannot be created
        """
        self.config = config
        self.file_manager = FileManager()
        self.file_manager.ensure_directory(config.backup_dir, BACKUP_DIR_MODE)

        self.runner = runner or ProcessRunner()
        self.runtime = runtime or ContainerRuntime(self.runner, timeout=config.command_timeout_s)

        self.catalog = CatalogStore(config.mongo_uri, config.backups_collection_name, client_factory)
        self.probe = ActivityProbe(config.mongo_uri, config.sales_collection_name, client_factory, clock)
        self.gate = DialogGate(
            self.runner,
            title=config.dialog_title,
            text=config.dialog_text,
            width=config.dialog_width,
        )

        engine_kwargs = {"clock": clock}
        if sleep is not None:
            engine_kwargs["sleep"] = sleep
        self.engine = SnapshotEngine(config, self.catalog, self.runtime, self.file_manager, **engine_kwargs)

        self.loop = ControlLoop(config, self.probe, self.gate, self.engine, sleep=sleep)

    def preflight(self) -> None:
        """Log the state of the database container and the catalog. Never fails."""
        container = self.config.container_name

        try:
            status = self.runtime.status(container)
        except DockerException as e:
            logger.warning(
                "Docker daemon not reachable for container check",
                extra={"error": str(e), "suggestions": create_error_suggestions("docker_not_running")},
            )
        else:
            if status is None:
                logger.warning(f"Database container {container} not found", extra={"container": container})
            elif status != "running":
                logger.warning(f"Database container {container} is {status}", extra={"container": container})
            else:
                logger.info(f"Database container {container} is running", extra={"container": container})

        try:
            records = self.catalog.list_records()
        except CatalogUnavailable as e:
            logger.warning(f"Snapshot catalog not readable at startup: {e.details}")
            return

        restorable = [record for record in records if record.status is SnapshotStatus.CREATED]
        logger.info(
            f"Snapshot catalog holds {len(records)} backups, {len(restorable)} restorable",
            extra={"backups": len(records), "restorable": len(restorable)},
        )
        if restorable:
            latest = restorable[0]
            logger.info(
                f"Latest restorable backup: {latest.filename}",
                extra={"snapshot_id": str(latest.id), "size_mb": latest.size_mb},
            )

    def run(self, install_signal_handlers: bool = True) -> None:
        """Run the monitoring loop until a stop is requested."""
        if install_signal_handlers:
            self.loop.install_signal_handlers()
        self.loop.run_forever()
