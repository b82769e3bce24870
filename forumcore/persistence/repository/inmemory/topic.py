"""In-memory topic repository for testing."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from forumcore.domain.model.topic import Topic
from forumcore.domain.repository.topic import TopicRepository
from forumcore.domain.value import TopicId

from .store import InMemoryDatabase


class InMemoryTopicRepository(TopicRepository):
    """In-memory implementation of TopicRepository for testing."""

    def __init__(self, db: InMemoryDatabase | None = None) -> None:
        self._db = db or InMemoryDatabase()

    async def find_by_id(self, topic_id: TopicId) -> Optional[Topic]:
        """Find a topic by ID."""
        return self._db.topics.get(topic_id)

    @asynccontextmanager
    async def exclusive(self, topic_id: TopicId) -> AsyncIterator[Optional[Topic]]:
        """Hold the asyncio lock of the topic, yielding its current state."""
        async with self._db.topic_locks.hold(topic_id):
            yield self._db.topics.get(topic_id)

    async def save(self, topic: Topic) -> Topic:
        """Save a topic."""
        self._db.topics[topic.id] = topic
        return topic
