"""Snapshot catalog kept as documents in the observed database."""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pymongo import DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from tocrecovery.utils.errors import CatalogUnavailable, create_error_suggestions

logger = logging.getLogger(__name__)


class SnapshotStatus(Enum):
    """Lifecycle of a snapshot: created -> restored, or created -> failed."""

    CREATED = "created"
    RESTORED = "restored"
    FAILED = "failed"


@dataclass
class SnapshotRecord:
    """Catalog entry describing one snapshot archive."""

    filename: str
    path: str
    created_at: datetime
    size_mb: int
    status: SnapshotStatus = SnapshotStatus.CREATED
    id: Any = None

    def to_document(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "path": self.path,
            "createdAt": self.created_at,
            "sizeMB": self.size_mb,
            "status": self.status.value,
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "SnapshotRecord":
        return cls(
            filename=document["filename"],
            path=document["path"],
            created_at=document["createdAt"],
            size_mb=int(document.get("sizeMB") or 0),
            status=SnapshotStatus(document["status"]),
            id=document.get("_id"),
        )


class CatalogStore:
    """Reads and writes snapshot records.

    Every operation opens its own connection and closes it before returning,
    whether it succeeded or not.
    """

    def __init__(
        self,
        mongo_uri: str,
        collection_name: str = "backups",
        client_factory: Callable[[str], Any] = MongoClient,
    ):
        """
        Initialize catalog store.

        Args:
            mongo_uri: Connection string; its database holds the catalog
            collection_name: Name of the catalog collection
            client_factory: Callable returning a client for a URI
        """
        self.mongo_uri = mongo_uri
        self.collection_name = collection_name
        self.client_factory = client_factory

    def _run(self, operation: str, action: Callable[[Any], Any]) -> Any:
        client = None
        try:
            client = self.client_factory(self.mongo_uri)
            collection = client.get_default_database()[self.collection_name]
            return action(collection)
        except PyMongoError as e:
            raise CatalogUnavailable(
                f"Snapshot catalog unavailable during {operation}",
                details=str(e),
                suggestions=create_error_suggestions("database_unreachable"),
            ) from e
        finally:
            if client is not None:
                client.close()

    def insert(self, record: SnapshotRecord) -> Any:
        """
        Store a new record and assign its identity.

        Args:
            record: Record to store; its ``id`` is filled in

        Returns:
            Identity of the stored record

        Raises:
            CatalogUnavailable: If the database cannot be written
        """
        result = self._run("insert", lambda collection: collection.insert_one(record.to_document()))
        record.id = result.inserted_id

        logger.info(
            f"Snapshot registered: {record.filename}",
            extra={"snapshot_id": str(record.id), "size_mb": record.size_mb},
        )
        return record.id

    def latest_created(self) -> Optional[SnapshotRecord]:
        """
        Newest record still in ``created`` status.

        Ties on the creation instant go to the larger identity.

        Returns:
            Optional[SnapshotRecord]: Record to restore, or None if there is none
        """
        document = self._run(
            "lookup",
            lambda collection: collection.find_one(
                {"status": SnapshotStatus.CREATED.value},
                sort=[("createdAt", DESCENDING), ("_id", DESCENDING)],
            ),
        )

        if document is None:
            return None
        return SnapshotRecord.from_document(document)

    def set_status(self, record_id: Any, status: SnapshotStatus) -> None:
        """Write the status field of a record. Callers never downgrade a status."""
        result = self._run(
            "status update",
            lambda collection: collection.update_one({"_id": record_id}, {"$set": {"status": status.value}}),
        )

        if result.matched_count == 0:
            logger.warning(
                "No snapshot record matched the status update",
                extra={"snapshot_id": str(record_id), "status": status.value},
            )
            return

        logger.info(
            f"Snapshot status set to {status.value}",
            extra={"snapshot_id": str(record_id), "status": status.value},
        )

    def list_records(self) -> List[SnapshotRecord]:
        """All records, newest first."""
        documents = self._run(
            "listing",
            lambda collection: list(collection.find({}, sort=[("createdAt", DESCENDING), ("_id", DESCENDING)])),
        )
        return [SnapshotRecord.from_document(document) for document in documents]
