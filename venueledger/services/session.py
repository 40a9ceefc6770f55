"""One load-operate-save cycle against a snapshot store.

    async with LedgerSession(store, ctx) as ledger:
        booking = ledger.apply(bookings.create_booking, client_id, venue_id, day, "18:00")

Operations run against the in-memory snapshot. On a clean exit the collected
audit entries are folded in and the snapshot is saved once; if the block
raises, nothing is saved and the pending audit entries are dropped.
"""

import logging
from collections.abc import Callable
from typing import Any

from venueledger.models import Snapshot
from venueledger.services.context import LedgerContext
from venueledger.services.store import SnapshotStore

logger = logging.getLogger(__name__)


class LedgerSession:
    def __init__(self, store: SnapshotStore, ctx: LedgerContext, enforce_version: bool = False):
        self.store = store
        self.ctx = ctx
        self.enforce_version = enforce_version
        self.snapshot: Snapshot | None = None
        self._loaded_version = 0
        self._dirty = False

    async def __aenter__(self) -> "LedgerSession":
        self.snapshot = await self.store.load()
        self._loaded_version = self.snapshot.version
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        pending = self._drain_audit()
        if exc_type is not None:
            if pending:
                logger.debug("Discarding %d audit entries after %s", len(pending), exc_type.__name__)
            return False

        if not self._dirty:
            return False

        expected = self._loaded_version if self.enforce_version else None
        self.snapshot = await self.store.save(self.snapshot.with_audit(pending), expected_version=expected)
        return False

    def _drain_audit(self) -> list:
        """Collect entries from recorders that buffer them (those with a drain()).

        A recorder without drain() writes to its own sink; its entries are not
        folded into the snapshot.
        """
        drain = getattr(self.ctx.audit, "drain", None)
        return drain() if callable(drain) else []

    def apply(self, operation: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run a mutating operation and keep its new snapshot.

        Operations return either the new snapshot alone or a tuple that starts
        with it; the rest of the tuple (a single entity, or several) is handed
        back to the caller.
        """
        result = operation(self.snapshot, self.ctx, *args, **kwargs)
        self._dirty = True
        if isinstance(result, Snapshot):
            self.snapshot = result
            return None

        self.snapshot, *rest = result
        return rest[0] if len(rest) == 1 else tuple(rest)
