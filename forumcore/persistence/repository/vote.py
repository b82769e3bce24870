"""PostgreSQL implementation of Vote repository."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, delete, func, select, text
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from forumcore.domain.model import Vote
from forumcore.domain.repository import VoteRepository
from forumcore.domain.value import Subject, SubjectType, UserId
from forumcore.persistence.mappers import row_to_vote, vote_to_dict
from forumcore.persistence.tables import votes_table


class PostgresVoteRepository(VoteRepository):
    """PostgreSQL implementation of VoteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    @asynccontextmanager
    async def serialize(self, subject: Subject, user_id: UserId) -> AsyncIterator[None]:
        """Take a transaction-scoped advisory lock on the (subject, user) pair.

        The lock is released when the request's transaction commits or
        rolls back, not when this context exits.
        """
        key = f"vote:{subject}:{user_id}"
        await self.session.execute(
            text("SELECT pg_advisory_xact_lock(hashtextextended(:key, 0))"),
            {"key": key},
        )
        yield

    def _subject_filter(self, subject: Subject):
        return and_(
            votes_table.c.subject_type == subject.subject_type.value,
            votes_table.c.subject_id == subject.subject_id,
        )

    async def find_by_user_and_subject(
        self, subject: Subject, user_id: UserId
    ) -> Optional[Vote]:
        """Find a user's vote on a subject."""
        stmt = select(votes_table).where(
            and_(self._subject_filter(subject), votes_table.c.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_vote(row._asdict()) if row else None

    async def find_by_subject(self, subject: Subject) -> List[Vote]:
        """Find all votes on a subject."""
        stmt = select(votes_table).where(self._subject_filter(subject))
        result = await self.session.execute(stmt)
        return [row_to_vote(row._asdict()) for row in result.fetchall()]

    async def save(self, vote: Vote) -> Vote:
        """Upsert the vote on the (subject_type, subject_id, user_id) key."""
        vote_dict = vote_to_dict(vote)
        stmt = insert(votes_table).values(**vote_dict)
        stmt = stmt.on_conflict_do_update(
            constraint="unique_vote",
            set_={
                "value": stmt.excluded.value,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return vote

    async def delete_by_user_and_subject(
        self, subject: Subject, user_id: UserId
    ) -> bool:
        """Delete a user's vote on a subject."""
        stmt = delete(votes_table).where(
            and_(self._subject_filter(subject), votes_table.c.user_id == user_id)
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0  # type: ignore[attr-defined]

    async def sum_by_subject(self, subject: Subject) -> int:
        """Sum of vote values on a subject."""
        stmt = select(func.coalesce(func.sum(votes_table.c.value), 0)).where(
            self._subject_filter(subject)
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)

    async def count_created_since(self, user_id: UserId, since: datetime) -> int:
        """Count the user's vote rows created at or after `since`."""
        stmt = (
            select(func.count())
            .select_from(votes_table)
            .where(
                and_(
                    votes_table.c.user_id == user_id,
                    votes_table.c.created_at >= since,
                )
            )
        )
        result = await self.session.execute(stmt)
        return int(result.scalar() or 0)

    async def sum_by_subjects(
        self, subject_type: SubjectType, subject_ids: Sequence[UUID]
    ) -> Dict[UUID, int]:
        """Sum of vote values for many subjects (batch query)."""
        if not subject_ids:
            return {}

        stmt = (
            select(votes_table.c.subject_id, func.sum(votes_table.c.value))
            .where(
                and_(
                    votes_table.c.subject_type == subject_type.value,
                    votes_table.c.subject_id.in_(subject_ids),
                )
            )
            .group_by(votes_table.c.subject_id)
        )
        result = await self.session.execute(stmt)
        return {
            UUID(str(subject_id)): int(total) for subject_id, total in result.fetchall()
        }

    async def find_by_user_and_subjects(
        self,
        user_id: UserId,
        subject_type: SubjectType,
        subject_ids: Sequence[UUID],
    ) -> List[Vote]:
        """Find a user's votes on multiple subjects (batch query)."""
        if not subject_ids:
            return []

        stmt = select(votes_table).where(
            and_(
                votes_table.c.user_id == user_id,
                votes_table.c.subject_type == subject_type.value,
                votes_table.c.subject_id.in_(subject_ids),
            )
        )
        result = await self.session.execute(stmt)
        rows = result.fetchall()
        return [row_to_vote(row._asdict()) for row in rows]
