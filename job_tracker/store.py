"""Asynchronous job application store.

Usage:
    store = await JobStore.open("sqlite:data/jobs.db")
    app_id = await store.insert(JobApplication(company="TechCorp"))
    app = await store.fetch_by_id(app_id)
    await store.close()

Each call is its own unit of work. Nothing spans calls, so a sequence such
as update-then-fetch can interleave with another writer on the same file.
"""

from __future__ import annotations

import os

from . import applications
from .connection import ConnectionPool
from .log import get_logger
from .models import JobApplication

log = get_logger(__name__)


class JobStore:
    """Handle to a job application database.

    Handles are cheap: clone() returns another handle over the same pool.
    Closing any handle closes the pool for all of them.
    """

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    @classmethod
    async def open(cls, target: str | os.PathLike) -> JobStore:
        """Open (creating if needed) the database at *target*.

        *target* is ``sqlite::memory:`` for a transient database, or a file
        path optionally prefixed with ``sqlite:``. Missing parent directories
        are created. Raises StoreConnectionError on failure.
        """
        pool = await ConnectionPool.open(target)
        log.debug("Opened job store at %s", pool.target)
        return cls(pool)

    def clone(self) -> JobStore:
        return type(self)(self._pool)

    async def insert(self, app: JobApplication) -> int:
        """Store *app* as a new record and return its id."""
        return await self._pool.run(applications.insert_application, app)

    async def fetch_all(self) -> list[JobApplication]:
        """Return every record, most recently created first."""
        return await self._pool.run(applications.list_applications)

    async def fetch_by_id(self, app_id: int) -> JobApplication:
        """Return the record with *app_id*; raises NotFoundError if absent."""
        return await self._pool.run(applications.get_application, app_id)

    async def update(self, app: JobApplication) -> None:
        """Overwrite the stored record with id ``app.id``.

        Raises NotFoundError(0) if *app* has no id, NotFoundError(app.id) if
        no such record exists.
        """
        await self._pool.run(applications.update_application, app)

    async def delete(self, app_id: int) -> None:
        await self._pool.run(applications.delete_application, app_id)

    async def clear_all(self) -> None:
        removed = await self._pool.run(applications.clear_applications)
        log.debug("Cleared %d job application(s)", removed)

    async def count(self) -> int:
        return await self._pool.run(applications.count_applications)

    async def close(self) -> None:
        """Release the connection. The store must not be used afterwards."""
        await self._pool.close()
        log.debug("Closed job store at %s", self._pool.target)

    async def __aenter__(self) -> JobStore:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()
