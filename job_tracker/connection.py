"""Database connection management.

A connection target is either an in-memory marker (``sqlite::memory:`` or
``:memory:``) or a file path, optionally prefixed with ``sqlite:`` or
``sqlite://``. File targets get their parent directories created on demand.

ConnectionPool wraps the single sqlite3 connection shared by every JobStore
handle opened from it; calls are serialized by a lock and run on the event
loop's default executor so they never block the loop.
"""

from __future__ import annotations

import asyncio
import functools
import os
import sqlite3
import threading
from pathlib import Path
from typing import Any, Callable, TypeVar

from .errors import StoreConnectionError
from .log import get_logger
from .schema import SCHEMA_SQL

log = get_logger(__name__)

MEMORY_TARGET = "sqlite::memory:"
MEMORY_TARGETS = frozenset({MEMORY_TARGET, ":memory:"})

T = TypeVar("T")


def resolve_target(target: str | os.PathLike) -> Path | None:
    """Return the database file path for *target*, or None for in-memory.

    Raises StoreConnectionError if the target names no path.
    """
    if isinstance(target, os.PathLike):
        target = os.fspath(target)
    if not isinstance(target, str):
        raise StoreConnectionError(f"Invalid database target: {target!r}")
    if target in MEMORY_TARGETS:
        return None

    path = target
    for prefix in ("sqlite://", "sqlite:"):
        if path.startswith(prefix):
            path = path[len(prefix):]
            break

    if not path.strip():
        raise StoreConnectionError(f"Invalid database target: {target!r}")
    return Path(path)


def ensure_database_directory(path: Path) -> None:
    """Create the parent directory chain of *path* if it is missing."""
    parent = path.parent
    if str(parent) in ("", ".") or parent.exists():
        return
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StoreConnectionError(
            f"Could not create database directory {parent}: {e}"
        ) from e
    log.debug("Created database directory %s", parent)


def connect(target: str | os.PathLike) -> sqlite3.Connection:
    """Open *target* and make sure the schema exists. Returns the connection."""
    path = resolve_target(target)
    if path is not None:
        ensure_database_directory(path)

    try:
        conn = sqlite3.connect(
            ":memory:" if path is None else str(path),
            check_same_thread=False,
        )
    except sqlite3.Error as e:
        raise StoreConnectionError(f"Could not open database {target}: {e}") from e

    try:
        conn.row_factory = sqlite3.Row
        if path is not None:
            conn.execute("PRAGMA journal_mode=WAL")
        conn.executescript(SCHEMA_SQL)
    except sqlite3.Error as e:
        conn.close()
        raise StoreConnectionError(
            f"Could not initialize database {target}: {e}"
        ) from e

    log.debug("Schema ready in %s", "memory" if path is None else path)
    return conn


class ConnectionPool:
    """One sqlite3 connection shared between store handles."""

    def __init__(self, conn: sqlite3.Connection, target: str):
        self.target = target
        self._conn = conn
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    async def open(cls, target: str | os.PathLike) -> ConnectionPool:
        loop = asyncio.get_running_loop()
        conn = await loop.run_in_executor(None, connect, target)
        return cls(conn, os.fspath(target))

    @property
    def closed(self) -> bool:
        return self._closed

    async def run(
        self, fn: Callable[..., T], *args: Any, **kwargs: Any
    ) -> T:
        """Run ``fn(*args, db=<connection>, **kwargs)`` off the event loop.

        Driver errors are re-raised as StoreConnectionError.
        """
        loop = asyncio.get_running_loop()
        call = functools.partial(self._call, fn, args, kwargs)
        return await loop.run_in_executor(None, call)

    def _call(self, fn, args, kwargs):
        with self._lock:
            try:
                return fn(*args, db=self._conn, **kwargs)
            except sqlite3.Error as e:
                if not self._closed and self._conn.in_transaction:
                    self._conn.rollback()
                raise StoreConnectionError(f"Database error: {e}") from e

    async def close(self) -> None:
        """Close the connection once any in-flight call has finished."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._close)

    def _close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._conn.close()
            self._closed = True
        log.debug("Closed database %s", self.target)
