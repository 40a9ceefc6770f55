"""Snapshot persistence.

A store hands out the whole ledger as one Snapshot and takes it back in one
write. Every save bumps the version. When the caller passes the version it
loaded, a store that has moved on since raises StaleSnapshotError; without it
the last write wins.
"""

import logging
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from venueledger.core.errors import StaleSnapshotError
from venueledger.models import Base, Snapshot, SnapshotRecord

logger = logging.getLogger(__name__)


class SnapshotStore(Protocol):
    async def load(self) -> Snapshot: ...

    async def save(self, snapshot: Snapshot, expected_version: int | None = None) -> Snapshot: ...


def _next_version(snapshot: Snapshot, current: int, expected_version: int | None) -> Snapshot:
    if expected_version is not None and expected_version != current:
        raise StaleSnapshotError(expected_version, current)
    if snapshot.version != current:
        logger.warning("Overwriting snapshot v%d with a copy loaded at v%d", current, snapshot.version)
    return snapshot.model_copy(update={"version": current + 1})


class InMemorySnapshotStore:
    """Keeps the snapshot in process memory. Used by tests and the memory backend."""

    def __init__(self, snapshot: Snapshot | None = None):
        self._snapshot = snapshot or Snapshot()

    async def load(self) -> Snapshot:
        return self._snapshot

    async def save(self, snapshot: Snapshot, expected_version: int | None = None) -> Snapshot:
        self._snapshot = _next_version(snapshot, self._snapshot.version, expected_version)
        return self._snapshot


class SqlSnapshotStore:
    """Keeps the snapshot as a JSON payload in the snapshots table, one row per key."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], key: str = "default"):
        self._session_factory = session_factory
        self.key = key

    async def load(self) -> Snapshot:
        async with self._session_factory() as session:
            record = await session.get(SnapshotRecord, self.key)
            if record is None:
                return Snapshot()
            snapshot = Snapshot.model_validate(record.payload)
            return snapshot.model_copy(update={"version": record.version})

    async def save(self, snapshot: Snapshot, expected_version: int | None = None) -> Snapshot:
        async with self._session_factory() as session:
            async with session.begin():
                record = await session.get(SnapshotRecord, self.key, with_for_update=True)
                current = record.version if record is not None else 0
                saved = _next_version(snapshot, current, expected_version)
                payload = saved.model_dump(mode="json")

                if record is None:
                    session.add(SnapshotRecord(key=self.key, version=saved.version, payload=payload))
                else:
                    record.version = saved.version
                    record.payload = payload

        logger.debug("Saved snapshot %s v%d", self.key, saved.version)
        return saved


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
