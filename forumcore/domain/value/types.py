"""Domain value objects for the forum engine.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum
from uuid import UUID

from forumcore.domain.error import InvalidVoteValueError
from forumcore.domain.value.common import ValueObject


class SubjectType(str, Enum):
    """Type of entity that can be voted on."""

    TOPIC = "topic"
    REPLY = "reply"


class VoteValue(int, Enum):
    """A user's vote on a subject.

    NONE is never stored: it is the absence of a vote row.
    """

    UP = 1
    DOWN = -1
    NONE = 0

    @classmethod
    def parse(cls, raw: int) -> "VoteValue":
        """Map a raw integer from the storage or request boundary.

        Raises:
            InvalidVoteValueError: If raw is not -1, 0 or 1
        """
        # bool is an int subclass; True must not sneak in as an upvote
        if isinstance(raw, bool) or raw not in (-1, 0, 1):
            raise InvalidVoteValueError(raw)
        return cls(raw)

    def toggled_by(self, requested: "VoteValue") -> "VoteValue":
        """Value that results when `requested` is cast over this stored value.

        Casting the same direction again retracts the vote.
        """
        if requested is not VoteValue.NONE and requested is self:
            return VoteValue.NONE
        return requested


class SortMode(str, Enum):
    """Ordering applied independently to every sibling group of a thread."""

    OLDEST = "oldest"
    NEWEST = "newest"
    MOST_VOTED = "most_voted"


class TopicType(str, Enum):
    """Kind of topic.

    Only questions can carry an accepted answer.
    """

    DISCUSSION = "discussion"
    QUESTION = "question"
    ANNOUNCEMENT = "announcement"


class Role(str, Enum):
    """Forum role of an actor."""

    MEMBER = "member"
    MODERATOR = "moderator"
    ADMIN = "admin"


class Subject(ValueObject):
    """A votable entity, identified by type and id."""

    subject_type: SubjectType
    subject_id: UUID

    def __str__(self) -> str:
        return f"{self.subject_type.value}:{self.subject_id}"


class Actor(ValueObject):
    """The caller of a mutating operation.

    Supplied by the identity collaborator (JWT payload in the HTTP layer).
    can_downvote is an externally decided permission, not derived here.
    """

    user_id: UUID
    role: Role = Role.MEMBER
    can_downvote: bool = False

    @property
    def is_moderator(self) -> bool:
        """Moderators and admins share moderation rights."""
        return self.role in (Role.MODERATOR, Role.ADMIN)
