"""Vote entity.

A vote is a single user's +1 or -1 on a topic or reply. A retracted vote
is not stored at all, so a row never holds VoteValue.NONE.
"""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from forumcore.domain.model.common import DomainModel
from forumcore.domain.value import Subject, SubjectType, UserId, VoteId, VoteValue
from forumcore.util.clock import utc_now


class Vote(DomainModel):
    """Vote entity.

    Business rules:
    - One vote per user per subject (unique constraint / serialized writes)
    - Score of a subject is always the live sum of its votes
    - Polymorphic reference to the subject (topic or reply)
    """

    id: VoteId
    user_id: UserId
    subject_type: SubjectType
    subject_id: UUID  # TopicId or ReplyId (both are UUIDs)
    value: VoteValue
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("value")
    @classmethod
    def validate_value_is_stored(cls, v: VoteValue) -> VoteValue:
        """Reject NONE, which is represented by absence of the row."""
        if v is VoteValue.NONE:
            raise ValueError("A stored vote must be UP or DOWN")
        return v

    @property
    def subject(self) -> Subject:
        """The subject this vote applies to."""
        return Subject(subject_type=self.subject_type, subject_id=self.subject_id)
