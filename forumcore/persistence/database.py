"""Engine and session factory for the Postgres store."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from forumcore.config import DatabaseSettings


def create_engine(database: DatabaseSettings, echo: bool = False) -> AsyncEngine:
    """Build the async engine.

    Every pooled connection gets a ``lock_timeout`` so a request stuck
    behind a vote advisory lock or a topic row lock fails with a database
    error rather than holding its connection indefinitely.
    """
    return create_async_engine(
        database.url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=database.pool_size,
        max_overflow=database.max_overflow,
        connect_args={
            "server_settings": {"lock_timeout": str(database.lock_timeout_ms)},
        },
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Rows are mapped to domain models right away, so expiring them on
    # commit would only trigger useless reloads.
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
