"""Moderate topic use case (lock, unlock, pin, unpin)."""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel

from forumcore.domain.service import TopicService
from forumcore.domain.value import Actor, TopicId

from .view import TopicItem, to_topic_item


class TopicModerationAction(str, Enum):
    """Moderator actions on a topic."""

    LOCK = "lock"
    UNLOCK = "unlock"
    PIN = "pin"
    UNPIN = "unpin"


class ModerateTopicRequest(BaseModel):
    """Moderate topic request."""

    topic_id: str  # UUID string
    action: TopicModerationAction
    actor: Actor


class ModerateTopicUseCase:
    """Use case for moderator actions on a topic."""

    def __init__(self, topic_service: TopicService) -> None:
        self.topic_service = topic_service

    async def execute(self, request: ModerateTopicRequest) -> TopicItem:
        """Execute moderation flow.

        Raises:
            NotAuthorizedError: If the actor is not a moderator
            NotFoundError: If the topic does not exist
        """
        topic_id = TopicId(UUID(request.topic_id))
        action = request.action

        if action in (TopicModerationAction.LOCK, TopicModerationAction.UNLOCK):
            topic = await self.topic_service.set_locked(
                topic_id, request.actor, locked=action == TopicModerationAction.LOCK
            )
        else:
            topic = await self.topic_service.set_pinned(
                topic_id, request.actor, pinned=action == TopicModerationAction.PIN
            )

        return to_topic_item(topic)
