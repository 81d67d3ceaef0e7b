"""
Database connection management for the API.

``get_db()`` lends a read-only SQLite connection for the duration of one
request.  Connections are opened with ``mode=ro`` on first demand, kept idle
between requests, and at most APP_DB_POOL_SIZE are lent out at once; a
request that cannot get one within APP_DB_POOL_WAIT seconds answers 503.

The database path comes from APP_DB_PATH (default: voters.sqlite) and can be
overridden by create_app(db_path=...).
"""

import logging
import sqlite3
import threading
from collections.abc import Generator
from pathlib import Path

from fastapi import HTTPException

from utils.config import AppConfig

logger = logging.getLogger(__name__)

_cfg = AppConfig.from_env()
_DB_PATH: Path = _cfg.db_path


class _ReadOnlyPool:
    """Idle read-only connections for one database file."""

    def __init__(self, db_path: Path, max_size: int = 10, wait_seconds: float = 30.0) -> None:
        self.db_path = Path(db_path)
        self.wait_seconds = wait_seconds
        self._slots = threading.BoundedSemaphore(max_size)
        self._idle: list[sqlite3.Connection] = []
        self._opened = 0
        self._lock = threading.Lock()

    @property
    def active(self) -> int:
        """Connections opened and not yet closed."""
        return self._opened

    def acquire(self) -> sqlite3.Connection:
        """Borrow a connection, most recently returned first.

        Raises:
            TimeoutError: every slot stayed lent out for ``wait_seconds``.
        """
        if not self._slots.acquire(timeout=self.wait_seconds):
            raise TimeoutError(f"no free connection to {self.db_path.name}")
        with self._lock:
            if self._idle:
                return self._idle.pop()
            self._opened += 1
        try:
            conn = sqlite3.connect(f"file:{self.db_path}?mode=ro", uri=True,
                                   check_same_thread=False, timeout=10)
        except sqlite3.Error:
            with self._lock:
                self._opened -= 1
            self._slots.release()
            raise
        conn.row_factory = sqlite3.Row
        return conn

    def release(self, conn: sqlite3.Connection) -> None:
        with self._lock:
            self._idle.append(conn)
        self._slots.release()

    def close_all(self) -> None:
        """Close idle connections; lent ones are closed by the garbage collector."""
        with self._lock:
            idle, self._idle = self._idle, []
            self._opened = 0
        for conn in idle:
            conn.close()
        logger.debug("closed %d pooled connection(s) to %s", len(idle), self.db_path)


_pool: _ReadOnlyPool | None = None
_pool_lock = threading.Lock()


def get_db_path() -> Path:
    """Return the configured database path."""
    return _DB_PATH


def set_db_path(db_path: Path) -> None:
    """Point the API at a different database, dropping pooled connections."""
    global _DB_PATH
    close_pool()
    _DB_PATH = Path(db_path)


def _get_pool() -> _ReadOnlyPool:
    global _pool
    with _pool_lock:
        if _pool is None:
            _pool = _ReadOnlyPool(_DB_PATH, _cfg.pool_size, _cfg.pool_wait)
        return _pool


def close_pool() -> None:
    """Close pooled connections and forget the pool (shutdown, path change)."""
    global _pool
    with _pool_lock:
        pool, _pool = _pool, None
    if pool is not None:
        pool.close_all()


def get_db() -> Generator[sqlite3.Connection, None, None]:
    """FastAPI dependency: yield a read-only connection for one request.

    Raises HTTP 503 when the database file is missing or every connection
    is busy, instead of a raw SQLite or timeout error.
    """
    if not _DB_PATH.exists():
        raise HTTPException(
            status_code=503,
            detail=f"Database not found at '{_DB_PATH}'.",
        )
    pool = _get_pool()
    try:
        conn = pool.acquire()
    except TimeoutError as exc:
        logger.warning("connection pool exhausted: %s", exc)
        raise HTTPException(status_code=503, detail="Database busy, retry shortly.") from exc
    try:
        yield conn
    finally:
        pool.release(conn)
