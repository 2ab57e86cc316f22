"""Immutable runtime settings for the disaster-recovery agent."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

DEFAULTS: Dict[str, Any] = {
    "mongo_uri": "mongodb://localhost:27017/tocgame",
    "container_name": "mongodb",
    "data_volume_name": "mongo_data",
    "backup_dir": os.path.join("~", "backups", "tocgamedb"),
    "check_interval_ms": 300000,  # 5 minutes
    "sales_collection_name": "sales",
    "backups_collection_name": "backups",
    "database_image": "mongo",
    "recovery_delay_ms": 10000,
    "quiescence_delay_ms": 3000,
    "command_timeout_s": None,
    "dialog_title": "Estado del Sistema",
    "dialog_text": "No se detectaron ventas en {minutes} minutos. ¿Existen problemas?",
    "dialog_width": 400,
    "log_dir": "logs",
}

# Historical variable names come first; the upper-cased option name is also accepted
ENV_VARS: Dict[str, tuple] = {
    "mongo_uri": ("MONGO_URI",),
    "container_name": ("CONTAINER_NAME",),
    "data_volume_name": ("DOCKER_VOLUME", "DATA_VOLUME_NAME"),
    "backup_dir": ("BACKUP_DIR",),
    "check_interval_ms": ("CHECK_INTERVAL", "CHECK_INTERVAL_MS"),
    "sales_collection_name": ("SALES_COLLECTION", "SALES_COLLECTION_NAME"),
    "backups_collection_name": ("BACKUPS_COLLECTION", "BACKUPS_COLLECTION_NAME"),
    "database_image": ("DATABASE_IMAGE",),
    "recovery_delay_ms": ("RECOVERY_DELAY", "RECOVERY_DELAY_MS"),
    "quiescence_delay_ms": ("QUIESCENCE_DELAY", "QUIESCENCE_DELAY_MS"),
    "command_timeout_s": ("COMMAND_TIMEOUT", "COMMAND_TIMEOUT_S"),
    "dialog_title": ("DIALOG_TITLE",),
    "dialog_text": ("DIALOG_TEXT",),
    "dialog_width": ("DIALOG_WIDTH",),
    "log_dir": ("LOG_DIR",),
}

INTEGER_OPTIONS = {
    "check_interval_ms",
    "recovery_delay_ms",
    "quiescence_delay_ms",
    "command_timeout_s",
    "dialog_width",
}


@dataclass(frozen=True)
class RecoveryConfig:
    """Process-wide settings, fixed once the agent starts."""

    mongo_uri: str = DEFAULTS["mongo_uri"]
    container_name: str = DEFAULTS["container_name"]
    data_volume_name: str = DEFAULTS["data_volume_name"]
    backup_dir: str = field(default_factory=lambda: os.path.expanduser(DEFAULTS["backup_dir"]))
    check_interval_ms: int = DEFAULTS["check_interval_ms"]
    sales_collection_name: str = DEFAULTS["sales_collection_name"]
    backups_collection_name: str = DEFAULTS["backups_collection_name"]
    database_image: str = DEFAULTS["database_image"]
    recovery_delay_ms: int = DEFAULTS["recovery_delay_ms"]
    quiescence_delay_ms: int = DEFAULTS["quiescence_delay_ms"]
    command_timeout_s: Optional[int] = DEFAULTS["command_timeout_s"]
    dialog_title: str = DEFAULTS["dialog_title"]
    dialog_text: str = DEFAULTS["dialog_text"]
    dialog_width: int = DEFAULTS["dialog_width"]
    log_dir: str = DEFAULTS["log_dir"]

    @property
    def check_interval_s(self) -> float:
        return self.check_interval_ms / 1000

    @property
    def recovery_delay_s(self) -> float:
        return self.recovery_delay_ms / 1000

    @property
    def quiescence_delay_s(self) -> float:
        return self.quiescence_delay_ms / 1000
