"""Update reply use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from forumcore.domain.service import ReplyService, VoteService
from forumcore.domain.value import Actor, ReplyId, Subject, SubjectType, UserId

from .view import ReplyItem, to_reply_item


class UpdateReplyRequest(BaseModel):
    """Update reply request."""

    reply_id: str  # UUID string
    content: str
    actor: Actor
    reason: str | None = Field(default=None, max_length=500)  # Moderation edits


class UpdateReplyUseCase:
    """Use case for editing a reply."""

    def __init__(self, reply_service: ReplyService, vote_service: VoteService) -> None:
        self.reply_service = reply_service
        self.vote_service = vote_service

    async def execute(self, request: UpdateReplyRequest) -> ReplyItem:
        """Execute update reply flow.

        Authors edit inside the edit window; moderators edit at any time.

        Raises:
            NotFoundError: If the reply does not exist
            ContentDeletedError: If the reply is deleted
            NotAuthorError: If the actor is neither author nor moderator
            EditWindowExpiredError: If the author's edit window has closed
            ContentTooShortError, ContentTooLongError: Content length out of bounds
        """
        reply = await self.reply_service.update_reply(
            reply_id=ReplyId(UUID(request.reply_id)),
            actor=request.actor,
            content=request.content,
            reason=request.reason,
        )
        subject = Subject(subject_type=SubjectType.REPLY, subject_id=reply.id)
        scores = await self.vote_service.get_scores(SubjectType.REPLY, [reply.id])
        return to_reply_item(
            reply,
            score=scores[reply.id],
            user_vote=await self.vote_service.get_user_vote(
                subject, UserId(request.actor.user_id)
            ),
            viewer=request.actor,
        )
