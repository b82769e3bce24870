"""Shared in-memory store backing the in-memory repositories."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Generic, Hashable, TypeVar
from uuid import UUID

from forumcore.domain.model import Reply, ReplyEdit, Topic, Vote
from forumcore.domain.value import ReplyId, SubjectType, TopicId

VoteKey = tuple[SubjectType, UUID, UUID]

K = TypeVar("K", bound=Hashable)


class KeyedLocks(Generic[K]):
    """One asyncio.Lock per key, dropped once nobody holds or awaits it."""

    def __init__(self) -> None:
        self._locks: dict[K, asyncio.Lock] = {}
        self._users: dict[K, int] = {}

    @asynccontextmanager
    async def hold(self, key: K) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    def __len__(self) -> int:
        return len(self._locks)


class InMemoryDatabase:
    """Rows and locks for one in-memory "database".

    Repositories are created per request, so the rows live here and are
    shared by every repository built over the same instance.
    """

    def __init__(self) -> None:
        self.topics: dict[TopicId, Topic] = {}
        self.replies: dict[ReplyId, Reply] = {}
        self.reply_edits: list[ReplyEdit] = []
        self.votes: dict[VoteKey, Vote] = {}
        self.vote_locks: KeyedLocks[str] = KeyedLocks()
        self.topic_locks: KeyedLocks[TopicId] = KeyedLocks()
