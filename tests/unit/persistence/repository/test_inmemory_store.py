"""Unit tests for the in-memory store and its keyed locks."""

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest

from forumcore.domain.model import Vote
from forumcore.domain.service import VoteService
from forumcore.domain.value import Subject, SubjectType, UserId, VoteId, VoteValue
from forumcore.persistence.repository.inmemory import (
    InMemoryDatabase,
    InMemoryTopicRepository,
    InMemoryVoteRepository,
)
from forumcore.persistence.repository.inmemory.store import KeyedLocks
from tests.factories import BASE_TIME, make_reply, make_topic
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestKeyedLocks:
    @pytest.mark.asyncio
    async def test_lock_dropped_after_last_holder(self):
        locks: KeyedLocks[str] = KeyedLocks()
        order = []

        async def hold(name: str):
            async with locks.hold("key"):
                order.append(f"{name}-in")
                await asyncio.sleep(0)
                order.append(f"{name}-out")

        await asyncio.gather(hold("a"), hold("b"))

        assert order == ["a-in", "a-out", "b-in", "b-out"]
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_lock_released_on_error(self):
        locks: KeyedLocks[str] = KeyedLocks()

        with pytest.raises(RuntimeError):
            async with locks.hold("key"):
                raise RuntimeError("boom")

        assert len(locks) == 0


class TestInMemoryDatabase:
    @pytest.mark.asyncio
    async def test_casts_leave_no_locks_behind(self, unit_env):
        """Votes on many subjects do not grow the lock tables."""
        db = await unit_env.get(InMemoryDatabase)
        vote_service = await unit_env.get(VoteService)
        topic = make_topic()
        db.topics[topic.id] = topic
        replies = [make_reply(topic, minutes=n) for n in range(20)]
        for reply in replies:
            db.replies[reply.id] = reply

        await asyncio.gather(
            *(
                vote_service.cast_vote(
                    Subject(subject_type=SubjectType.REPLY, subject_id=reply.id),
                    UserId(uuid4()),
                    VoteValue.UP,
                )
                for reply in replies
            )
        )
        async with InMemoryTopicRepository(db).exclusive(topic.id):
            pass

        assert len(db.votes) == 20
        assert len(db.vote_locks) == 0
        assert len(db.topic_locks) == 0

    @pytest.mark.asyncio
    async def test_count_created_since(self):
        repo = InMemoryVoteRepository(InMemoryDatabase())
        voter = UserId(uuid4())
        for days_ago in (0, 0, 1):
            created = BASE_TIME - timedelta(days=days_ago)
            await repo.save(
                Vote(
                    id=VoteId(uuid4()),
                    user_id=voter,
                    subject_type=SubjectType.TOPIC,
                    subject_id=uuid4(),
                    value=VoteValue.UP,
                    created_at=created,
                    updated_at=created,
                )
            )

        assert await repo.count_created_since(voter, BASE_TIME) == 2
        assert await repo.count_created_since(UserId(uuid4()), BASE_TIME) == 0
