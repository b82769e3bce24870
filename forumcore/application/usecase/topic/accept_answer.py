"""Accept answer use case."""

from uuid import UUID

from pydantic import BaseModel

from forumcore.domain.service import AcceptanceService
from forumcore.domain.value import Actor, ReplyId, TopicId

from .view import TopicItem, to_topic_item


class AcceptAnswerRequest(BaseModel):
    """Accept answer request."""

    topic_id: str  # UUID string
    reply_id: str  # UUID string
    actor: Actor


class AcceptAnswerUseCase:
    """Use case for marking a reply as a question's accepted answer."""

    def __init__(self, acceptance_service: AcceptanceService) -> None:
        """Initialize accept answer use case.

        Args:
            acceptance_service: Accepted answer domain service
        """
        self.acceptance_service = acceptance_service

    async def execute(self, request: AcceptAnswerRequest) -> TopicItem:
        """Execute accept answer flow.

        Returns:
            The topic with its new accepted_answer_id

        Raises:
            NotFoundError: If the topic does not exist
            NotQuestionTypeError: If the topic is not a question
            NotAuthorizedError: If the actor is neither topic author nor moderator
            ReplyNotInTopicError: If the reply is not part of the topic
            ContentDeletedError: If the reply is deleted
        """
        topic = await self.acceptance_service.accept(
            topic_id=TopicId(UUID(request.topic_id)),
            reply_id=ReplyId(UUID(request.reply_id)),
            actor=request.actor,
        )
        return to_topic_item(topic)
