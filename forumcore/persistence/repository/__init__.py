"""PostgreSQL repository implementations."""

from forumcore.persistence.repository.reply import PostgresReplyRepository
from forumcore.persistence.repository.topic import PostgresTopicRepository
from forumcore.persistence.repository.vote import PostgresVoteRepository

__all__ = [
    "PostgresReplyRepository",
    "PostgresTopicRepository",
    "PostgresVoteRepository",
]
