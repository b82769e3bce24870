"""In-memory vote repository for testing."""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Optional, Sequence
from uuid import UUID

from forumcore.domain.model.vote import Vote
from forumcore.domain.repository.vote import VoteRepository
from forumcore.domain.value import Subject, SubjectType, UserId

from .store import InMemoryDatabase


class InMemoryVoteRepository(VoteRepository):
    """In-memory implementation of VoteRepository for testing."""

    def __init__(self, db: InMemoryDatabase | None = None) -> None:
        self._db = db or InMemoryDatabase()

    @asynccontextmanager
    async def serialize(self, subject: Subject, user_id: UserId) -> AsyncIterator[None]:
        """Hold the asyncio lock of the (subject, user) pair."""
        async with self._db.vote_locks.hold(f"{subject}:{user_id}"):
            yield

    async def find_by_user_and_subject(
        self, subject: Subject, user_id: UserId
    ) -> Optional[Vote]:
        """Find a user's vote on a subject."""
        return self._db.votes.get(
            (subject.subject_type, subject.subject_id, user_id)
        )

    async def find_by_subject(self, subject: Subject) -> list[Vote]:
        """Find all votes on a subject."""
        return [
            v
            for v in self._db.votes.values()
            if v.subject_type == subject.subject_type
            and v.subject_id == subject.subject_id
        ]

    async def save(self, vote: Vote) -> Vote:
        """Insert or replace the vote of its (subject, user) pair."""
        self._db.votes[(vote.subject_type, vote.subject_id, vote.user_id)] = vote
        return vote

    async def delete_by_user_and_subject(
        self, subject: Subject, user_id: UserId
    ) -> bool:
        """Delete a user's vote on a subject."""
        key = (subject.subject_type, subject.subject_id, user_id)
        return self._db.votes.pop(key, None) is not None

    async def sum_by_subject(self, subject: Subject) -> int:
        """Sum of vote values on a subject."""
        return sum(int(v.value) for v in await self.find_by_subject(subject))

    async def count_created_since(self, user_id: UserId, since: datetime) -> int:
        """Count the user's vote rows created at or after `since`."""
        return sum(
            1
            for v in self._db.votes.values()
            if v.user_id == user_id and v.created_at >= since
        )

    async def sum_by_subjects(
        self, subject_type: SubjectType, subject_ids: Sequence[UUID]
    ) -> dict[UUID, int]:
        """Sum of vote values for many subjects (batch query)."""
        wanted = set(subject_ids)
        sums: dict[UUID, int] = {}
        for vote in self._db.votes.values():
            if vote.subject_type == subject_type and vote.subject_id in wanted:
                sums[vote.subject_id] = sums.get(vote.subject_id, 0) + int(vote.value)
        return sums

    async def find_by_user_and_subjects(
        self,
        user_id: UserId,
        subject_type: SubjectType,
        subject_ids: Sequence[UUID],
    ) -> list[Vote]:
        """Find a user's votes on multiple subjects (batch query)."""
        if not subject_ids:
            return []

        wanted = set(subject_ids)
        return [
            v
            for v in self._db.votes.values()
            if v.user_id == user_id
            and v.subject_type == subject_type
            and v.subject_id in wanted
        ]
