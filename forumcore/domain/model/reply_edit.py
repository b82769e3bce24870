"""Reply edit history entry.

Every content change keeps the previous text. Moderator edits of someone
else's reply are flagged and carry a reason.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from forumcore.domain.model.common import DomainModel
from forumcore.domain.value import ReplyEditId, ReplyId, UserId
from forumcore.util.clock import utc_now


class ReplyEdit(DomainModel):
    """One recorded edit of a reply."""

    id: ReplyEditId
    reply_id: ReplyId
    editor_id: UserId
    previous_content: str
    reason: Optional[str] = Field(default=None, max_length=500)
    is_moderation: bool = False
    edited_at: datetime = Field(default_factory=utc_now)
