"""Topic aggregate root.

Topics own a tree of replies. Question topics may designate one accepted
answer; the designation lives only in accepted_answer_id, so a reply is
accepted exactly when the topic points at it.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from forumcore.domain.model.common import DomainModel
from forumcore.domain.value import ReplyId, TopicId, TopicType, UserId
from forumcore.util.clock import utc_now


class Topic(DomainModel):
    """Topic aggregate root."""

    id: TopicId
    type: TopicType
    title: str = Field(min_length=1, max_length=300)
    author_id: UserId
    is_locked: bool = False
    is_pinned: bool = False
    accepted_answer_id: Optional[ReplyId] = None
    created_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def validate_accepted_answer_type(self) -> "Topic":
        """Only question topics can carry an accepted answer."""
        if self.accepted_answer_id is not None and self.type != TopicType.QUESTION:
            raise ValueError("Only question topics can have an accepted answer")
        return self

    def is_accepted(self, reply_id: ReplyId) -> bool:
        """Whether the given reply is this topic's accepted answer."""
        return self.accepted_answer_id is not None and self.accepted_answer_id == reply_id
