"""Repository interfaces for the forum domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from forumcore.domain.repository.reply import ReplyRepository
from forumcore.domain.repository.topic import TopicRepository
from forumcore.domain.repository.vote import VoteRepository

__all__ = [
    "TopicRepository",
    "ReplyRepository",
    "VoteRepository",
]
