"""Configuration schema for the disaster-recovery agent."""

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "mongo_uri": {
            "type": "string",
            "pattern": r"^mongodb(\+srv)?://.+",
            "description": "Connection string of the observed database",
        },
        "container_name": {"type": "string", "minLength": 1},
        "data_volume_name": {"type": "string", "minLength": 1},
        "backup_dir": {"type": "string", "minLength": 1},
        "check_interval_ms": {"type": "integer", "minimum": 1000},
        "sales_collection_name": {"type": "string", "minLength": 1},
        "backups_collection_name": {"type": "string", "minLength": 1},
        "database_image": {"type": "string", "minLength": 1},
        "recovery_delay_ms": {"type": "integer", "minimum": 0},
        "quiescence_delay_ms": {"type": "integer", "minimum": 0},
        "command_timeout_s": {
            "type": ["integer", "null"],
            "minimum": 1,
            "description": "Timeout for dump/restore/container commands; null disables it",
        },
        "dialog_title": {"type": "string"},
        "dialog_text": {"type": "string"},
        "dialog_width": {"type": "integer", "minimum": 100},
        "log_dir": {"type": "string", "minLength": 1},
    },
    "additionalProperties": False,
}
