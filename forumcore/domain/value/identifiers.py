"""Strongly typed identifiers for forum domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

# Core domain entity identifiers
UserId = NewType("UserId", UUID)
TopicId = NewType("TopicId", UUID)
ReplyId = NewType("ReplyId", UUID)
ReplyEditId = NewType("ReplyEditId", UUID)
VoteId = NewType("VoteId", UUID)
