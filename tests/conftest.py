"""
Test fixtures for the jobscout core
"""

import os

os.environ.setdefault("JOBSCOUT_LOG_FILE", "false")

from datetime import datetime, timezone

import pytest

from jobscout.auth import MockAuthService
from jobscout.catalog import generate_job
from jobscout.errors import StorageError
from jobscout.sources.mock import MockJobsService
from jobscout.state import Store
from jobscout.storage import FileStorage, MemoryStorage

FIXED_NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class FailingStorage(MemoryStorage):
    """Reads work; every write raises StorageError."""

    def set(self, key, value):
        raise StorageError("disk full")

    def remove(self, keys):
        raise StorageError("disk full")


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def failing_storage():
    return FailingStorage()


@pytest.fixture
def file_storage(tmp_path):
    return FileStorage(tmp_path / "storage.json")


@pytest.fixture
def jobs_service():
    return MockJobsService(latency=0.0, now=FIXED_NOW)


@pytest.fixture
def store(jobs_service, memory_storage):
    s = Store(jobs_service=jobs_service, auth_service=MockAuthService(), storage=memory_storage)
    yield s
    s.close()


@pytest.fixture
def make_store(jobs_service):
    """Build a store over a given storage backend."""
    created = []

    def _make(storage):
        s = Store(jobs_service=jobs_service, auth_service=MockAuthService(), storage=storage)
        created.append(s)
        return s

    yield _make
    for s in created:
        s.close()


@pytest.fixture
def sample_job():
    return generate_job(7, FIXED_NOW)


@pytest.fixture
def sample_jobs():
    return [generate_job(i, FIXED_NOW) for i in range(1, 26)]
