"""Topic response item shared by the topic use cases."""

from datetime import datetime

from pydantic import BaseModel

from forumcore.domain.model import Topic
from forumcore.domain.value import TopicType


class TopicItem(BaseModel):
    """Topic as returned by the API."""

    topic_id: str
    type: TopicType
    title: str
    author_id: str
    is_locked: bool
    is_pinned: bool
    accepted_answer_id: str | None
    created_at: datetime
    score: int = 0


def to_topic_item(topic: Topic, score: int = 0) -> TopicItem:
    return TopicItem(
        topic_id=str(topic.id),
        type=topic.type,
        title=topic.title,
        author_id=str(topic.author_id),
        is_locked=topic.is_locked,
        is_pinned=topic.is_pinned,
        accepted_answer_id=(
            str(topic.accepted_answer_id) if topic.accepted_answer_id else None
        ),
        created_at=topic.created_at,
        score=score,
    )
