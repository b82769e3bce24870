"""PostgreSQL implementation of Reply repository."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from forumcore.domain.model import Reply, ReplyEdit
from forumcore.domain.repository import ReplyRepository
from forumcore.domain.value import ReplyId, TopicId
from forumcore.persistence.mappers import (
    reply_edit_to_dict,
    reply_to_dict,
    row_to_reply,
    row_to_reply_edit,
)
from forumcore.persistence.tables import replies_table, reply_edits_table


class PostgresReplyRepository(ReplyRepository):
    """PostgreSQL implementation of ReplyRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, reply_id: ReplyId) -> Optional[Reply]:
        """Find a reply by ID."""
        stmt = select(replies_table).where(replies_table.c.id == reply_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_reply(row._asdict()) if row else None

    async def find_by_topic(self, topic_id: TopicId) -> List[Reply]:
        """Find all replies of a topic in creation order, tombstones included."""
        stmt = (
            select(replies_table)
            .where(replies_table.c.topic_id == topic_id)
            .order_by(replies_table.c.created_at, replies_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_reply(row._asdict()) for row in result.fetchall()]

    async def save(self, reply: Reply) -> Reply:
        """Save a reply (create or update)."""
        reply_dict = reply_to_dict(reply)
        stmt = insert(replies_table).values(**reply_dict)
        stmt = stmt.on_conflict_do_update(
            index_elements=[replies_table.c.id],
            set_={k: v for k, v in reply_dict.items() if k != "id"},
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return reply

    async def save_edit(self, edit: ReplyEdit) -> ReplyEdit:
        """Append an edit history entry."""
        stmt = insert(reply_edits_table).values(**reply_edit_to_dict(edit))
        await self.session.execute(stmt)
        await self.session.flush()
        return edit

    async def find_edits(self, reply_id: ReplyId) -> List[ReplyEdit]:
        """Edit history of a reply, oldest first."""
        stmt = (
            select(reply_edits_table)
            .where(reply_edits_table.c.reply_id == reply_id)
            .order_by(reply_edits_table.c.edited_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_reply_edit(row._asdict()) for row in result.fetchall()]
