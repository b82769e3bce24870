"""Create topic use case."""

from pydantic import BaseModel

from forumcore.domain.service import TopicService
from forumcore.domain.value import Actor, TopicType

from .view import TopicItem, to_topic_item


class CreateTopicRequest(BaseModel):
    """Create topic request."""

    type: TopicType = TopicType.DISCUSSION
    title: str
    actor: Actor  # Authenticated author


class CreateTopicUseCase:
    """Use case for opening a new topic."""

    def __init__(self, topic_service: TopicService) -> None:
        """Initialize create topic use case.

        Args:
            topic_service: Topic domain service
        """
        self.topic_service = topic_service

    async def execute(self, request: CreateTopicRequest) -> TopicItem:
        """Execute create topic flow.

        Raises:
            ContentTooShortError, ContentTooLongError: Title length out of bounds
        """
        topic = await self.topic_service.create_topic(
            actor=request.actor,
            topic_type=request.type,
            title=request.title,
        )
        return to_topic_item(topic)
