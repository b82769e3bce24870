"""In-memory repository implementations for testing."""

from .reply import InMemoryReplyRepository
from .store import InMemoryDatabase
from .topic import InMemoryTopicRepository
from .vote import InMemoryVoteRepository

__all__ = [
    "InMemoryDatabase",
    "InMemoryReplyRepository",
    "InMemoryTopicRepository",
    "InMemoryVoteRepository",
]
