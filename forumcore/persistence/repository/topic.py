"""PostgreSQL implementation of Topic repository."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from forumcore.domain.model import Topic
from forumcore.domain.repository import TopicRepository
from forumcore.domain.value import TopicId
from forumcore.persistence.mappers import row_to_topic, topic_to_dict
from forumcore.persistence.tables import topics_table


class PostgresTopicRepository(TopicRepository):
    """PostgreSQL implementation of TopicRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, topic_id: TopicId) -> Optional[Topic]:
        """Find a topic by ID."""
        stmt = select(topics_table).where(topics_table.c.id == topic_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_topic(row._asdict()) if row else None

    @asynccontextmanager
    async def exclusive(self, topic_id: TopicId) -> AsyncIterator[Optional[Topic]]:
        """Lock the topic row with SELECT ... FOR UPDATE.

        The row lock is held until the request's transaction ends.
        """
        stmt = (
            select(topics_table).where(topics_table.c.id == topic_id).with_for_update()
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        yield row_to_topic(row._asdict()) if row else None

    async def save(self, topic: Topic) -> Topic:
        """Save a topic (create or update)."""
        topic_dict = topic_to_dict(topic)
        stmt = insert(topics_table).values(**topic_dict)
        stmt = stmt.on_conflict_do_update(
            index_elements=[topics_table.c.id],
            set_={k: v for k, v in topic_dict.items() if k != "id"},
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return topic
