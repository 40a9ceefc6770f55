"""FastAPI dependencies for injection into route handlers."""

from fastapi import Depends, Header, Request

from venueledger.core.config import Settings, settings
from venueledger.services.context import ConflictMode, LedgerContext
from venueledger.services.session import LedgerSession
from venueledger.services.store import InMemorySnapshotStore, SnapshotStore, SqlSnapshotStore


def build_store(config: Settings) -> SnapshotStore:
    """Create the snapshot store selected by VL_STORE_BACKEND."""
    if config.store_backend == "memory":
        return InMemorySnapshotStore()

    from venueledger.core.database import async_session_factory

    return SqlSnapshotStore(async_session_factory, key=config.snapshot_key)


def get_store(request: Request) -> SnapshotStore:
    return request.app.state.store


def get_actor_id(x_actor_id: str | None = Header(default=None)) -> str:
    """Acting user for audit entries and payments; falls back to the configured operator."""
    return x_actor_id or settings.default_actor_id


def build_context(actor_id: str) -> LedgerContext:
    return LedgerContext(
        actor_id=actor_id,
        conflict_mode=ConflictMode(settings.conflict_mode),
        strict_payment_matching=settings.strict_payment_matching,
    )


def get_ledger(
    store: SnapshotStore = Depends(get_store),
    actor_id: str = Depends(get_actor_id),
) -> LedgerSession:
    """An unopened ledger session. Handlers enter it with `async with`."""
    return LedgerSession(store, build_context(actor_id), enforce_version=settings.enforce_snapshot_version)
