"""Shared fixtures: a record store per backend, a fixed clock, demo data."""

from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

import pytest

from jobboard.core.db import MemoryRecordStore, RecordKind, RecordStore, SQLiteRecordStore, init_db
from jobboard.core.schemas import User
from jobboard.core.seed import seed_demo_data

NOW = datetime(2026, 3, 1, 12, 0, 0)


@pytest.fixture(params=["sqlite", "memory"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> Iterator[RecordStore]:
    """Empty store; every test using it runs once per backend."""
    if request.param == "sqlite":
        s: RecordStore = SQLiteRecordStore(init_db(tmp_path / "test.db"))
    else:
        s = MemoryRecordStore()
    yield s
    s.close()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def seeded(store: RecordStore, now: datetime) -> RecordStore:
    """Store loaded with the demo dataset at NOW."""
    seed_demo_data(store, now=now)
    return store


@pytest.fixture
def admin(seeded: RecordStore) -> User:
    return seeded.get_by_id(RecordKind.USERS, "1")


@pytest.fixture
def owner(seeded: RecordStore) -> User:
    """Sarah, owner of ScaleUp SaaS (c1, PROFESSIONAL)."""
    return seeded.get_by_id(RecordKind.USERS, "2")


@pytest.fixture
def recruiter(seeded: RecordStore) -> User:
    return seeded.get_by_id(RecordKind.USERS, "2b")


@pytest.fixture
def candidate(seeded: RecordStore) -> User:
    """Alex, who has applied to j1 and saved j3."""
    return seeded.get_by_id(RecordKind.USERS, "3")


@pytest.fixture
def other_candidate(seeded: RecordStore) -> User:
    return seeded.get_by_id(RecordKind.USERS, "4")
