"""Reply entity.

Replies are threaded under a topic with unlimited depth. A reply is never
physically removed: soft deletion replaces its content with a tombstone so
that descendants stay addressable.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from forumcore.domain.model.common import DomainModel
from forumcore.domain.value import ReplyId, TopicId, UserId
from forumcore.util.clock import utc_now

TOMBSTONE_CONTENT = "[Deleted]"
HIDDEN_CONTENT = "[Hidden]"


class Reply(DomainModel):
    """Reply entity.

    Threading is managed through parent_reply_id (None for top-level).
    The parent chain must be finite and acyclic.
    """

    id: ReplyId
    topic_id: TopicId
    parent_reply_id: Optional[ReplyId] = None
    author_id: UserId
    content: str = Field(min_length=1)
    quoted_reply_id: Optional[ReplyId] = None
    created_at: datetime = Field(default_factory=utc_now)
    edited_at: Optional[datetime] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    is_hidden: bool = False

    def is_authored_by(self, user_id: UserId) -> bool:
        """Whether the given user wrote this reply."""
        return self.author_id == user_id
