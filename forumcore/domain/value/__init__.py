"""Domain value objects for the forum engine."""

from forumcore.domain.value.identifiers import (
    ReplyEditId,
    ReplyId,
    TopicId,
    UserId,
    VoteId,
)
from forumcore.domain.value.types import (
    Actor,
    Role,
    SortMode,
    Subject,
    SubjectType,
    TopicType,
    VoteValue,
)

__all__ = [
    # Identifiers
    "UserId",
    "TopicId",
    "ReplyId",
    "ReplyEditId",
    "VoteId",
    # Types
    "Actor",
    "Role",
    "SortMode",
    "Subject",
    "SubjectType",
    "TopicType",
    "VoteValue",
]
