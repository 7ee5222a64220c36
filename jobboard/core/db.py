"""Record store for users, companies, jobs and applications.

Two backends share the RecordStore contract:
  - SQLiteRecordStore: one table per record kind, JSON payload per row
  - MemoryRecordStore: JSON strings held in process memory

Jobs are inserted at the head of their collection; other kinds append.
``list_all`` always returns collection order.
"""

import json
import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from jobboard.core.config import DatabaseConfig
from jobboard.core.schemas import Application, Company, Job, User

logger = logging.getLogger(__name__)


class RecordKind(StrEnum):
    USERS = "users"
    COMPANIES = "companies"
    JOBS = "jobs"
    APPLICATIONS = "applications"


MODELS: dict[RecordKind, type[BaseModel]] = {
    RecordKind.USERS: User,
    RecordKind.COMPANIES: Company,
    RecordKind.JOBS: Job,
    RecordKind.APPLICATIONS: Application,
}

# Kinds whose new records go to the front of the collection.
_HEAD_INSERT = {RecordKind.JOBS}


def _check_field(kind: RecordKind, field: str) -> None:
    if field not in MODELS[kind].model_fields:
        msg = f"'{field}' is not a field of {kind.value}"
        raise ValueError(msg)


def _merge(kind: RecordKind, record: BaseModel, patch: dict[str, Any]) -> BaseModel:
    """Apply a partial update and re-validate the whole record."""
    for field in patch:
        _check_field(kind, field)
    data = record.model_dump()
    data.update(patch)
    return MODELS[kind].model_validate(data)


class RecordStore(ABC):
    """Key-addressed persistence for the four record kinds plus a metadata map."""

    @abstractmethod
    def create(self, kind: RecordKind, record: BaseModel) -> None:
        """Insert a new record. Raises ValueError if the id already exists."""

    @abstractmethod
    def get_by_id(self, kind: RecordKind, record_id: str) -> Any:
        """Return the record with this id, or None."""

    @abstractmethod
    def list_all(self, kind: RecordKind) -> list[Any]:
        """Return every record of this kind in collection order."""

    @abstractmethod
    def replace(self, kind: RecordKind, record: BaseModel) -> bool:
        """Overwrite the stored record with the same id. False if absent."""

    @abstractmethod
    def delete(self, kind: RecordKind, record_id: str) -> bool:
        """Remove a record. False if it did not exist."""

    @abstractmethod
    def get_meta(self, key: str) -> str | None: ...

    @abstractmethod
    def set_meta(self, key: str, value: str) -> None: ...

    @abstractmethod
    def delete_meta(self, key: str) -> None: ...

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Run a check-then-act sequence without interleaved writers."""

    def close(self) -> None:  # noqa: B027
        """Release backend resources. No-op by default."""

    def list_by(self, kind: RecordKind, field: str, value: Any) -> list[Any]:
        """Return records whose ``field`` equals ``value``, in collection order."""
        _check_field(kind, field)
        return [r for r in self.list_all(kind) if getattr(r, field) == value]

    def update(self, kind: RecordKind, record_id: str, patch: dict[str, Any]) -> Any:
        """Merge ``patch`` into a stored record. Returns the new record, or None if absent."""
        current = self.get_by_id(kind, record_id)
        if current is None:
            logger.debug("update on missing %s '%s' ignored", kind.value, record_id)
            return None
        updated = _merge(kind, current, patch)
        self.replace(kind, updated)
        return updated

    def count(self, kind: RecordKind) -> int:
        return len(self.list_all(kind))


# ---------------------------------------------------------------------------
# SQLite
# ---------------------------------------------------------------------------

_RECORDS_TABLE = """
CREATE TABLE IF NOT EXISTS {table} (
    id        TEXT    PRIMARY KEY,
    position  INTEGER NOT NULL,
    data      TEXT    NOT NULL
);
"""

_META_TABLE = """
CREATE TABLE IF NOT EXISTS meta (
    key    TEXT PRIMARY KEY,
    value  TEXT NOT NULL
);
"""


def init_db(path: str | Path) -> sqlite3.Connection:
    """Create the database and tables, returning a connection.

    The connection runs in autocommit mode; multi-statement sequences go
    through ``SQLiteRecordStore.atomic``.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    for kind in RecordKind:
        conn.execute(_RECORDS_TABLE.format(table=kind.value))
    conn.execute(_META_TABLE)
    return conn


class SQLiteRecordStore(RecordStore):
    """RecordStore over a SQLite connection created by ``init_db``."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        self._depth = 0

    @property
    def conn(self) -> sqlite3.Connection:
        return self._conn

    def create(self, kind: RecordKind, record: BaseModel) -> None:
        table = kind.value
        if kind in _HEAD_INSERT:
            row = self._conn.execute(f"SELECT COALESCE(MIN(position), 0) - 1 FROM {table}").fetchone()
        else:
            row = self._conn.execute(f"SELECT COALESCE(MAX(position), 0) + 1 FROM {table}").fetchone()
        try:
            self._conn.execute(
                f"INSERT INTO {table} (id, position, data) VALUES (?, ?, ?)",
                (record.id, row[0], record.model_dump_json()),  # type: ignore[attr-defined]
            )
        except sqlite3.IntegrityError as e:
            msg = f"{kind.value} record '{record.id}' already exists"  # type: ignore[attr-defined]
            raise ValueError(msg) from e

    def get_by_id(self, kind: RecordKind, record_id: str) -> Any:
        row = self._conn.execute(
            f"SELECT data FROM {kind.value} WHERE id = ?", (record_id,),
        ).fetchone()
        if row is None:
            return None
        return MODELS[kind].model_validate_json(row["data"])

    def list_all(self, kind: RecordKind) -> list[Any]:
        rows = self._conn.execute(
            f"SELECT data FROM {kind.value} ORDER BY position",
        ).fetchall()
        model = MODELS[kind]
        return [model.model_validate_json(r["data"]) for r in rows]

    def list_by(self, kind: RecordKind, field: str, value: Any) -> list[Any]:
        _check_field(kind, field)
        if isinstance(value, bool):
            param: Any = int(value)
        elif isinstance(value, str):
            param = str(value)
        elif isinstance(value, int | float):
            param = value
        else:
            # None and structured values are compared after parsing.
            return super().list_by(kind, field, value)
        rows = self._conn.execute(
            f"SELECT data FROM {kind.value} WHERE json_extract(data, ?) = ? ORDER BY position",
            (f"$.{field}", param),
        ).fetchall()
        model = MODELS[kind]
        return [model.model_validate_json(r["data"]) for r in rows]

    def replace(self, kind: RecordKind, record: BaseModel) -> bool:
        cursor = self._conn.execute(
            f"UPDATE {kind.value} SET data = ? WHERE id = ?",
            (record.model_dump_json(), record.id),  # type: ignore[attr-defined]
        )
        return cursor.rowcount > 0

    def delete(self, kind: RecordKind, record_id: str) -> bool:
        cursor = self._conn.execute(f"DELETE FROM {kind.value} WHERE id = ?", (record_id,))
        return cursor.rowcount > 0

    def count(self, kind: RecordKind) -> int:
        return int(self._conn.execute(f"SELECT COUNT(*) FROM {kind.value}").fetchone()[0])

    def get_meta(self, key: str) -> str | None:
        row = self._conn.execute("SELECT value FROM meta WHERE key = ?", (key,)).fetchone()
        return None if row is None else str(row["value"])

    def set_meta(self, key: str, value: str) -> None:
        self._conn.execute(
            """
            INSERT INTO meta (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (key, value),
        )

    def delete_meta(self, key: str) -> None:
        self._conn.execute("DELETE FROM meta WHERE key = ?", (key,))

    @contextmanager
    def atomic(self) -> Iterator[None]:
        # Nested blocks join the outermost transaction.
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._conn.execute("BEGIN IMMEDIATE")
        self._depth = 1
        try:
            yield
        except BaseException:
            self._conn.execute("ROLLBACK")
            raise
        else:
            self._conn.execute("COMMIT")
        finally:
            self._depth = 0

    def close(self) -> None:
        self._conn.close()


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------


class MemoryRecordStore(RecordStore):
    """RecordStore that keeps each collection as a list of JSON strings.

    Records are serialised on write and parsed on read, so callers never share
    mutable state with the store.
    """

    def __init__(self) -> None:
        self._collections: dict[RecordKind, list[str]] = {kind: [] for kind in RecordKind}
        self._meta: dict[str, str] = {}
        self._lock = threading.RLock()

    def _index(self, kind: RecordKind, record_id: str) -> int | None:
        for i, raw in enumerate(self._collections[kind]):
            if json.loads(raw)["id"] == record_id:
                return i
        return None

    def create(self, kind: RecordKind, record: BaseModel) -> None:
        with self._lock:
            record_id = record.id  # type: ignore[attr-defined]
            if self._index(kind, record_id) is not None:
                msg = f"{kind.value} record '{record_id}' already exists"
                raise ValueError(msg)
            raw = record.model_dump_json()
            if kind in _HEAD_INSERT:
                self._collections[kind].insert(0, raw)
            else:
                self._collections[kind].append(raw)

    def get_by_id(self, kind: RecordKind, record_id: str) -> Any:
        with self._lock:
            i = self._index(kind, record_id)
            if i is None:
                return None
            return MODELS[kind].model_validate_json(self._collections[kind][i])

    def list_all(self, kind: RecordKind) -> list[Any]:
        with self._lock:
            model = MODELS[kind]
            return [model.model_validate_json(raw) for raw in self._collections[kind]]

    def replace(self, kind: RecordKind, record: BaseModel) -> bool:
        with self._lock:
            i = self._index(kind, record.id)  # type: ignore[attr-defined]
            if i is None:
                return False
            self._collections[kind][i] = record.model_dump_json()
            return True

    def delete(self, kind: RecordKind, record_id: str) -> bool:
        with self._lock:
            i = self._index(kind, record_id)
            if i is None:
                return False
            del self._collections[kind][i]
            return True

    def get_meta(self, key: str) -> str | None:
        return self._meta.get(key)

    def set_meta(self, key: str, value: str) -> None:
        self._meta[key] = value

    def delete_meta(self, key: str) -> None:
        self._meta.pop(key, None)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            yield


def open_store(config: DatabaseConfig) -> RecordStore:
    """Build the configured RecordStore backend."""
    if config.backend == "memory":
        logger.debug("Using in-memory record store")
        return MemoryRecordStore()
    logger.debug("Using SQLite record store at %s", config.path)
    return SQLiteRecordStore(init_db(config.path))
