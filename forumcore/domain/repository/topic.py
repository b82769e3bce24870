"""Topic repository interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Optional

from forumcore.domain.model.topic import Topic
from forumcore.domain.value import TopicId


class TopicRepository(ABC):
    """Repository for Topic aggregate."""

    @abstractmethod
    async def find_by_id(self, topic_id: TopicId) -> Optional[Topic]:
        """Find a topic by ID.

        Args:
            topic_id: The topic's unique identifier

        Returns:
            The topic if found, None otherwise
        """
        pass

    @abstractmethod
    def exclusive(
        self, topic_id: TopicId
    ) -> AbstractAsyncContextManager[Optional[Topic]]:
        """Single-writer section for one topic row.

        Yields the current topic (None if missing) and holds the row lock
        until the context exits. Concurrent callers for the same topic
        wait; other topics are unaffected.

        Args:
            topic_id: The topic to lock

        Returns:
            Async context manager yielding the locked topic
        """
        pass

    @abstractmethod
    async def save(self, topic: Topic) -> Topic:
        """Save a topic (create or update).

        Args:
            topic: The topic to save

        Returns:
            The saved topic
        """
        pass
