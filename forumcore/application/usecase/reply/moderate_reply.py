"""Moderate reply use case (hide, unhide, move)."""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel

from forumcore.domain.service import ReplyService, VoteService
from forumcore.domain.value import Actor, ReplyId, Subject, SubjectType, UserId

from .view import ReplyItem, to_reply_item


class ReplyModerationAction(str, Enum):
    """Moderator actions on a single reply."""

    HIDE = "hide"
    UNHIDE = "unhide"
    MOVE = "move"


class ModerateReplyRequest(BaseModel):
    """Moderate reply request."""

    reply_id: str  # UUID string
    action: ReplyModerationAction
    actor: Actor
    new_parent_reply_id: str | None = None  # MOVE only; None moves to top level


class ModerateReplyUseCase:
    """Use case for moderator actions on a reply."""

    def __init__(self, reply_service: ReplyService, vote_service: VoteService) -> None:
        self.reply_service = reply_service
        self.vote_service = vote_service

    async def execute(self, request: ModerateReplyRequest) -> ReplyItem:
        """Execute moderation flow.

        Raises:
            NotAuthorizedError: If the actor is not a moderator
            NotFoundError: If the reply does not exist
            ParentNotFoundError: MOVE target missing or in another topic
            StructuralInvariantError: MOVE under the reply's own descendant
        """
        reply_id = ReplyId(UUID(request.reply_id))

        if request.action == ReplyModerationAction.MOVE:
            new_parent = (
                ReplyId(UUID(request.new_parent_reply_id))
                if request.new_parent_reply_id
                else None
            )
            reply = await self.reply_service.move_reply(
                reply_id, new_parent, request.actor
            )
        else:
            reply = await self.reply_service.set_hidden(
                reply_id,
                request.actor,
                hidden=request.action == ReplyModerationAction.HIDE,
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
