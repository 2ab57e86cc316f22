"""Pytest configuration and shared fixtures."""

import itertools
import os
import shutil
import tempfile
from datetime import datetime, timezone

import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from tocrecovery.config.settings import RecoveryConfig
from tocrecovery.utils.errors import NonZeroExit
from tocrecovery.utils.process import ProcessResult

T0 = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def _matches(document, query):
    for key, condition in query.items():
        value = document.get(key)
        if isinstance(condition, dict):
            if "$gte" in condition and not (value is not None and value >= condition["$gte"]):
                return False
        elif value != condition:
            return False
    return True


def _sorted(documents, sort):
    result = list(documents)
    for key, direction in reversed(sort or []):
        result.sort(key=lambda document: document[key], reverse=direction < 0)
    return result


class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeUpdateResult:
    def __init__(self, matched_count):
        self.matched_count = matched_count


class FakeCollection:
    """In-memory stand-in for the pymongo collection methods the agent uses."""

    def __init__(self):
        self.documents = []
        self.calls = []

    def count_documents(self, query):
        self.calls.append(("count_documents", query))
        return sum(1 for document in self.documents if _matches(document, query))

    def insert_one(self, document):
        self.calls.append(("insert_one", document))
        stored = dict(document)
        stored.setdefault("_id", ObjectId())
        self.documents.append(stored)
        return FakeInsertResult(stored["_id"])

    def find_one(self, query, sort=None):
        self.calls.append(("find_one", query))
        found = _sorted([d for d in self.documents if _matches(d, query)], sort)
        return dict(found[0]) if found else None

    def find(self, query, sort=None):
        self.calls.append(("find", query))
        return [dict(d) for d in _sorted([d for d in self.documents if _matches(d, query)], sort)]

    def update_one(self, query, update):
        self.calls.append(("update_one", query, update))
        for document in self.documents:
            if _matches(document, query):
                document.update(update["$set"])
                return FakeUpdateResult(1)
        return FakeUpdateResult(0)


class FakeMongo:
    """Client factory serving one in-memory database; counts open/close pairs."""

    def __init__(self):
        self.collections = {}
        self.opened = 0
        self.closed = 0
        self.fail = False

    def collection(self, name):
        return self.collections.setdefault(name, FakeCollection())

    def __call__(self, uri):
        self.opened += 1
        return FakeClient(self)


class FakeClient:
    def __init__(self, mongo):
        self.mongo = mongo

    def get_default_database(self):
        if self.mongo.fail:
            raise ServerSelectionTimeoutError("localhost:27017: connection refused")
        return self

    def __getitem__(self, name):
        return self.mongo.collection(name)

    def close(self):
        self.mongo.closed += 1


class FakeRunner:
    """Records commands; answers from a table keyed by command prefix."""

    def __init__(self):
        self.calls = []
        self.responses = {}

    def respond(self, prefix, response):
        """``response`` is bytes (stdout), an int (exit code) or an exception."""
        self.responses[tuple(prefix)] = response

    def commands(self, *prefix):
        return [call for call in self.calls if tuple(call[: len(prefix)]) == prefix]

    def run(self, args, capture=False, timeout=None):
        self.calls.append(list(args))
        response = None
        for prefix, candidate in sorted(self.responses.items(), key=lambda item: -len(item[0])):
            if tuple(args[: len(prefix)]) == prefix:
                response = candidate
                break

        if isinstance(response, Exception):
            raise response
        if isinstance(response, int) and response != 0:
            raise NonZeroExit(f"{args[0]} exited with code {response}", returncode=response, command=args)
        if isinstance(response, bytes):
            return ProcessResult(returncode=0, stdout=response)
        return ProcessResult(returncode=0, stdout=b"" if capture else None)


@pytest.fixture
def temp_directory():
    """Create a temporary directory for testing."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolate_filesystem(temp_directory, monkeypatch):
    """Isolate filesystem operations to temporary directory."""
    monkeypatch.chdir(temp_directory)


@pytest.fixture
def backup_dir(temp_directory):
    return os.path.join(temp_directory, "backups", "tocgamedb")


@pytest.fixture
def recovery_config(backup_dir):
    """Configuration pointing at a temporary backup directory."""
    return RecoveryConfig(backup_dir=backup_dir, check_interval_ms=300000)


@pytest.fixture
def fake_mongo():
    return FakeMongo()


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def clock():
    return lambda: T0


@pytest.fixture
def sleeps():
    """Records requested sleeps instead of sleeping."""
    return []


@pytest.fixture
def id_sequence():
    """ObjectIds in increasing order."""
    counter = itertools.count(1)
    return lambda: ObjectId(f"{next(counter):024x}")


def add_snapshot(fake_mongo, created_at, status="created", filename=None, _id=None):
    """Put a catalog document straight into the fake database."""
    filename = filename or f"backup-{created_at.strftime('%Y%m%d-%H%M%S')}.gz"
    document = {
        "filename": filename,
        "path": f"/backups/{filename}",
        "createdAt": created_at,
        "sizeMB": 1,
        "status": status,
        "_id": _id or ObjectId(),
    }
    fake_mongo.collection("backups").documents.append(document)
    return document


def add_sales(fake_mongo, *created_at):
    for moment in created_at:
        fake_mongo.collection("sales").documents.append({"_id": ObjectId(), "createdAt": moment})
