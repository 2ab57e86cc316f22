"""Recent-sales check against the point-of-sale database."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from tocrecovery.utils.errors import ProbeError, create_error_suggestions

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ActivityProbe:
    """Answers whether any sale was recorded within a recent window."""

    def __init__(
        self,
        mongo_uri: str,
        collection_name: str = "sales",
        client_factory: Callable[[str], Any] = MongoClient,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.mongo_uri = mongo_uri
        self.collection_name = collection_name
        self.client_factory = client_factory
        self.clock = clock

    def has_recent_activity(self, window_ms: int) -> bool:
        """
        Check for sales created within the last ``window_ms`` milliseconds.

        Uses the agent's clock; skew against the database clock is not compensated.

        Raises:
            ProbeError: If the database cannot be queried
        """
        since = self.clock() - timedelta(milliseconds=window_ms)

        client = None
        try:
            client = self.client_factory(self.mongo_uri)
            collection = client.get_default_database()[self.collection_name]
            count = collection.count_documents({"createdAt": {"$gte": since}})
        except PyMongoError as e:
            raise ProbeError(
                "Could not check recent sales",
                details=str(e),
                suggestions=create_error_suggestions("database_unreachable"),
            ) from e
        finally:
            if client is not None:
                client.close()

        logger.debug("Recent sales counted", extra={"count": count, "since": since.isoformat()})
        return count > 0
