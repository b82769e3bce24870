"""Get edit history use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from forumcore.domain.service import ReplyService
from forumcore.domain.value import Actor, ReplyId


class ReplyEditItem(BaseModel):
    """One superseded version of a reply."""

    edit_id: str
    editor_id: str
    previous_content: str
    reason: str | None
    is_moderation: bool
    edited_at: datetime


class GetEditHistoryRequest(BaseModel):
    """Get edit history request."""

    reply_id: str  # UUID string
    actor: Actor


class GetEditHistoryResponse(BaseModel):
    """Edit history of a reply, oldest first."""

    reply_id: str
    edits: list[ReplyEditItem]


class GetEditHistoryUseCase:
    """Use case for moderators reviewing a reply's edits."""

    def __init__(self, reply_service: ReplyService) -> None:
        self.reply_service = reply_service

    async def execute(self, request: GetEditHistoryRequest) -> GetEditHistoryResponse:
        edits = await self.reply_service.get_edit_history(
            ReplyId(UUID(request.reply_id)), request.actor
        )
        return GetEditHistoryResponse(
            reply_id=request.reply_id,
            edits=[
                ReplyEditItem(
                    edit_id=str(edit.id),
                    editor_id=str(edit.editor_id),
                    previous_content=edit.previous_content,
                    reason=edit.reason,
                    is_moderation=edit.is_moderation,
                    edited_at=edit.edited_at,
                )
                for edit in edits
            ],
        )
