"""Async database engine and session management.

The database only ever holds whole ledger snapshots (one row per snapshot key),
so a single engine and session factory serve the whole application.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from venueledger.core.config import settings


def make_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        # In-memory SQLite lives inside one connection, so every session must share it
        if ":memory:" in database_url or database_url.endswith("://"):
            return create_async_engine(database_url, echo=echo, poolclass=StaticPool)
        return create_async_engine(database_url, echo=echo)
    return create_async_engine(
        database_url,
        echo=echo,
        pool_size=20,
        max_overflow=10,
        pool_pre_ping=True,
    )


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = make_engine(settings.database_url, echo=settings.database_echo)

async_session_factory = make_session_factory(engine)
