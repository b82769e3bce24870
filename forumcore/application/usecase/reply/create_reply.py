"""Create reply use case."""

from uuid import UUID

from pydantic import BaseModel

from forumcore.domain.service import ReplyService
from forumcore.domain.value import Actor, ReplyId, TopicId

from .view import ReplyItem, to_reply_item


class CreateReplyRequest(BaseModel):
    """Create reply request."""

    topic_id: str  # UUID string
    content: str
    actor: Actor  # Authenticated author
    parent_reply_id: str | None = None  # None for a top-level reply
    quoted_reply_id: str | None = None


class CreateReplyUseCase:
    """Use case for replying to a topic or to another reply."""

    def __init__(self, reply_service: ReplyService) -> None:
        """Initialize create reply use case.

        Args:
            reply_service: Reply domain service
        """
        self.reply_service = reply_service

    async def execute(self, request: CreateReplyRequest) -> ReplyItem:
        """Execute create reply flow.

        Args:
            request: Create reply request

        Returns:
            The new reply (score 0)

        Raises:
            NotFoundError: If the topic does not exist
            TopicLockedError: If the topic is locked
            ParentNotFoundError: If the parent is not in the topic
            QuotedReplyNotFoundError: If the quoted reply is not in the topic
            ContentTooShortError, ContentTooLongError: Content length out of bounds
        """
        reply = await self.reply_service.create_reply(
            topic_id=TopicId(UUID(request.topic_id)),
            actor=request.actor,
            content=request.content,
            parent_reply_id=(
                ReplyId(UUID(request.parent_reply_id))
                if request.parent_reply_id
                else None
            ),
            quoted_reply_id=(
                ReplyId(UUID(request.quoted_reply_id))
                if request.quoted_reply_id
                else None
            ),
        )
        return to_reply_item(reply, viewer=request.actor)
