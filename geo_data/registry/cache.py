"""
Registry Cache
==============

Keyed, timestamped local persistence of validated registry payloads.

Entries live in a single SQLite database under the cache root, one row per
key ("registry-index", "country-<code>"). Every write replaces the row in
one transaction, so a reader never sees a partially written entry.

Only validated payloads are ever written here; anything read back, fresh or
stale, can be trusted without re-validation.
"""

import json
import logging
import sqlite3
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Generator, Optional

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """A cached payload and the time it was stored."""
    key: str
    payload: Any
    stored_at: float

    def age(self, now: float) -> float:
        return now - self.stored_at


@dataclass
class CacheStats:
    """Summary of what the cache currently holds."""
    entry_count: int
    total_bytes: int


class CacheStore:
    """
    SQLite-based cache for registry payloads.

    Thread-local connections; the database file is created lazily on the
    first write so that an unused cache root stays empty.
    """

    DB_NAME = "cache.db"

    def __init__(self, cache_dir: Path, clock: Callable[[], float] = time.time):
        self.cache_dir = Path(cache_dir)
        self.db_path = self.cache_dir / self.DB_NAME
        self._clock = clock
        self._local = threading.local()

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a thread-local database connection."""
        if getattr(self._local, "connection", None) is None:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            connection = sqlite3.connect(str(self.db_path))
            connection.row_factory = sqlite3.Row
            self._initialize_schema(connection)
            self._local.connection = connection
        try:
            yield self._local.connection
        except Exception:
            self._local.connection.rollback()
            raise

    def _initialize_schema(self, conn: sqlite3.Connection) -> None:
        """Initialize database schema."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS entries (
                key TEXT PRIMARY KEY,
                payload TEXT NOT NULL,
                stored_at REAL NOT NULL
            )
        """)
        conn.commit()

    def _close(self) -> None:
        connection = getattr(self._local, "connection", None)
        if connection is not None:
            connection.close()
            self._local.connection = None

    def _read(self, key: str) -> Optional[CacheEntry]:
        if not self.db_path.exists():
            return None
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT payload, stored_at FROM entries WHERE key = ?",
                (key,),
            ).fetchone()

        if row is None:
            return None
        return CacheEntry(key=key, payload=json.loads(row["payload"]), stored_at=row["stored_at"])

    def get(self, key: str, max_age: float) -> Optional[Any]:
        """
        Get a cached payload if it is younger than max_age seconds.

        Returns None both for missing keys and for stale entries; use
        get_ignoring_age() to tell the two apart.
        """
        entry = self._read(key)
        if entry is None:
            logger.debug("Cache miss: %s", key)
            return None
        if entry.age(self._clock()) > max_age:
            logger.debug("Cache stale: %s (%.0fs old)", key, entry.age(self._clock()))
            return None
        logger.debug("Cache hit: %s", key)
        return entry.payload

    def get_ignoring_age(self, key: str) -> Optional[Any]:
        """Get a cached payload regardless of how old it is."""
        entry = self._read(key)
        return entry.payload if entry is not None else None

    def put(self, key: str, payload: Any) -> None:
        """Store a payload, replacing any existing entry for the key."""
        serialized = json.dumps(payload, ensure_ascii=False)
        with self._get_connection() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO entries (key, payload, stored_at) VALUES (?, ?, ?)",
                (key, serialized, self._clock()),
            )
            conn.commit()
        logger.debug("Cached %s (%d bytes)", key, len(serialized.encode("utf-8")))

    def clear(self) -> None:
        """Remove every cached entry."""
        self._close()
        for suffix in ("", "-journal", "-wal", "-shm"):
            path = self.db_path.with_name(self.db_path.name + suffix)
            if path.exists():
                path.unlink()
        logger.debug("Cleared cache at %s", self.cache_dir)

    def stats(self) -> Optional[CacheStats]:
        """Entry count and payload size, or None when nothing was ever cached."""
        if not self.db_path.exists():
            return None
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS entry_count, "
                "COALESCE(SUM(LENGTH(CAST(payload AS BLOB))), 0) AS total_bytes "
                "FROM entries"
            ).fetchone()
        return CacheStats(entry_count=row["entry_count"], total_bytes=row["total_bytes"])
