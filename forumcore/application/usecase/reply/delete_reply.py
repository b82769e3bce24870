"""Delete reply use case."""

from uuid import UUID

from pydantic import BaseModel

from forumcore.domain.service import ReplyService
from forumcore.domain.value import Actor, ReplyId


class DeleteReplyRequest(BaseModel):
    """Delete reply request."""

    reply_id: str  # UUID string
    actor: Actor


class DeleteReplyUseCase:
    """Use case for soft-deleting a reply.

    The reply becomes a tombstone and keeps its place in the tree, so its
    children stay nested under it.
    """

    def __init__(self, reply_service: ReplyService) -> None:
        self.reply_service = reply_service

    async def execute(self, request: DeleteReplyRequest) -> None:
        """Execute delete reply flow.

        Raises:
            NotFoundError: If the reply does not exist
            NotAuthorError: If the actor is neither author nor moderator
            ContentDeletedError: If the reply is already deleted
        """
        await self.reply_service.soft_delete(
            ReplyId(UUID(request.reply_id)), request.actor
        )
