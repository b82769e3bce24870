"""Builders for domain objects used across tests."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from forumcore.domain.model import Reply, Topic
from forumcore.domain.value import (
    Actor,
    ReplyId,
    Role,
    TopicId,
    TopicType,
    UserId,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_actor(role: Role = Role.MEMBER, can_downvote: bool | None = None) -> Actor:
    """Actor with a fresh user ID.

    Downvote permission defaults to what the default auth settings grant
    the role.
    """
    if can_downvote is None:
        can_downvote = role in (Role.MODERATOR, Role.ADMIN)
    return Actor(user_id=uuid4(), role=role, can_downvote=can_downvote)


def make_topic(
    topic_type: TopicType = TopicType.QUESTION,
    author: Actor | None = None,
    **overrides,
) -> Topic:
    """Topic built in memory, not yet saved."""
    fields = {
        "id": TopicId(uuid4()),
        "type": topic_type,
        "title": "How do I sort a thread?",
        "author_id": UserId(author.user_id if author else uuid4()),
        "created_at": BASE_TIME,
    }
    fields.update(overrides)
    return Topic(**fields)


def make_reply(
    topic: Topic,
    parent: Reply | None = None,
    author: Actor | None = None,
    minutes: int = 0,
    **overrides,
) -> Reply:
    """Reply created `minutes` after BASE_TIME, not yet saved."""
    fields = {
        "id": ReplyId(uuid4()),
        "topic_id": topic.id,
        "parent_reply_id": parent.id if parent else None,
        "author_id": UserId(author.user_id if author else uuid4()),
        "content": "A reply with enough content",
        "created_at": BASE_TIME + timedelta(minutes=minutes),
    }
    fields.update(overrides)
    return Reply(**fields)


class FrozenClock:
    """Clock whose "now" is set by the test."""

    def __init__(self, now: datetime = BASE_TIME) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)
