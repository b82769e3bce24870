"""Topic domain service."""

from uuid import uuid4

import logfire

from forumcore.config import ForumSettings
from forumcore.domain.error import (
    ContentTooLongError,
    ContentTooShortError,
    NotAuthorizedError,
    NotFoundError,
)
from forumcore.domain.model.topic import Topic
from forumcore.domain.repository import TopicRepository
from forumcore.domain.value import Actor, TopicId, TopicType, UserId
from forumcore.util.clock import Clock, utc_now

from .base import Service


class TopicService(Service):
    """Domain service for topic operations."""

    def __init__(
        self,
        topic_repository: TopicRepository,
        forum_settings: ForumSettings,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize topic service.

        Args:
            topic_repository: Topic repository
            forum_settings: Title length rules
            clock: Source of the current time
        """
        self.topic_repository = topic_repository
        self.settings = forum_settings
        self.clock = clock

    async def create_topic(self, actor: Actor, topic_type: TopicType, title: str) -> Topic:
        """Create a new topic.

        Args:
            actor: Author
            topic_type: Discussion, question or announcement
            title: Topic title

        Returns:
            Created topic

        Raises:
            ContentTooShortError, ContentTooLongError: Title length out of bounds
        """
        with logfire.span(
            "topic_service.create_topic",
            author_id=str(actor.user_id),
            type=topic_type.value,
        ):
            title = title.strip()
            if len(title) < self.settings.title_min_length:
                raise ContentTooShortError("Title", self.settings.title_min_length)
            if len(title) > self.settings.title_max_length:
                raise ContentTooLongError("Title", self.settings.title_max_length)

            topic = Topic(
                id=TopicId(uuid4()),
                type=topic_type,
                title=title,
                author_id=UserId(actor.user_id),
                created_at=self.clock(),
            )
            saved = await self.topic_repository.save(topic)
            logfire.info("Topic created", topic_id=str(saved.id), type=topic_type.value)
            return saved

    async def get_topic(self, topic_id: TopicId) -> Topic:
        """Get a topic by ID.

        Raises:
            NotFoundError: If the topic does not exist
        """
        topic = await self.topic_repository.find_by_id(topic_id)
        if not topic:
            logfire.warn("Topic not found", topic_id=str(topic_id))
            raise NotFoundError("Topic", str(topic_id))
        return topic

    async def set_locked(self, topic_id: TopicId, actor: Actor, locked: bool) -> Topic:
        """Lock or unlock a topic (moderators only)."""
        return await self._moderate(
            topic_id, actor, "lock" if locked else "unlock", is_locked=locked
        )

    async def set_pinned(self, topic_id: TopicId, actor: Actor, pinned: bool) -> Topic:
        """Pin or unpin a topic (moderators only)."""
        return await self._moderate(
            topic_id, actor, "pin" if pinned else "unpin", is_pinned=pinned
        )

    async def _moderate(
        self, topic_id: TopicId, actor: Actor, action: str, **changes: bool
    ) -> Topic:
        with logfire.span(
            f"topic_service.{action}",
            topic_id=str(topic_id),
            user_id=str(actor.user_id),
        ):
            if not actor.is_moderator:
                logfire.warn(
                    "Non-moderator topic moderation attempt",
                    topic_id=str(topic_id),
                    action=action,
                    user_id=str(actor.user_id),
                )
                raise NotAuthorizedError(action, "topic", str(topic_id), str(actor.user_id))

            # Row lock keeps this from racing an acceptance write
            async with self.topic_repository.exclusive(topic_id) as topic:
                if topic is None:
                    raise NotFoundError("Topic", str(topic_id))
                updated = await self.topic_repository.save(
                    topic.model_copy(update=changes)
                )

            logfire.info("Topic moderated", topic_id=str(topic_id), action=action)
            return updated
