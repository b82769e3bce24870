"""Persistence component: Postgres in production, in-memory under test."""

from collections.abc import AsyncIterator

import logfire
from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from forumcore.config import Settings
from forumcore.domain.repository import ReplyRepository, TopicRepository, VoteRepository
from forumcore.persistence.database import create_engine, create_session_factory
from forumcore.persistence.repository import (
    PostgresReplyRepository,
    PostgresTopicRepository,
    PostgresVoteRepository,
)
from forumcore.util.di.base import ProviderBase
from forumcore.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Repositories backed by one Postgres transaction per request."""

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        engine = create_engine(settings.database, echo=settings.debug)
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """One transaction per request.

        It commits when the request scope closes cleanly and rolls back
        otherwise. Vote advisory locks and topic row locks are transaction
        scoped, so both are released here.
        """
        async with session_factory() as session:
            try:
                yield session
            except BaseException as e:
                await session.rollback()
                logfire.warn("Request transaction rolled back", error_type=type(e).__name__)
                raise
            await session.commit()

    @provide(scope=Scope.REQUEST)
    def topics(self, session: AsyncSession) -> TopicRepository:
        return PostgresTopicRepository(session)

    @provide(scope=Scope.REQUEST)
    def replies(self, session: AsyncSession) -> ReplyRepository:
        return PostgresReplyRepository(session)

    @provide(scope=Scope.REQUEST)
    def votes(self, session: AsyncSession) -> VoteRepository:
        return PostgresVoteRepository(session)
