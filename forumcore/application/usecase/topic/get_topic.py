"""Get topic use case."""

from uuid import UUID

from pydantic import BaseModel

from forumcore.domain.service import TopicService, VoteService
from forumcore.domain.value import Subject, SubjectType, TopicId

from .view import TopicItem, to_topic_item


class GetTopicRequest(BaseModel):
    """Get topic request."""

    topic_id: str  # UUID string


class GetTopicUseCase:
    """Use case for reading a topic with its live score."""

    def __init__(self, topic_service: TopicService, vote_service: VoteService) -> None:
        self.topic_service = topic_service
        self.vote_service = vote_service

    async def execute(self, request: GetTopicRequest) -> TopicItem:
        """Execute get topic flow.

        Raises:
            NotFoundError: If the topic does not exist
        """
        topic = await self.topic_service.get_topic(TopicId(UUID(request.topic_id)))
        score = await self.vote_service.get_score(
            Subject(subject_type=SubjectType.TOPIC, subject_id=topic.id)
        )
        return to_topic_item(topic, score=score)
