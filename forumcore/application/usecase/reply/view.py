"""Reply response items shared by the reply use cases."""

from datetime import datetime

from pydantic import BaseModel

from forumcore.domain.model import HIDDEN_CONTENT, Reply, Topic
from forumcore.domain.value import Actor, VoteValue


class ReplyItem(BaseModel):
    """Reply as shown to a viewer."""

    reply_id: str
    topic_id: str
    parent_reply_id: str | None
    author_id: str
    content: str
    quoted_reply_id: str | None
    created_at: datetime
    edited_at: datetime | None
    is_deleted: bool
    is_hidden: bool
    is_accepted: bool
    score: int
    user_vote: int


class ReplyNodeItem(ReplyItem):
    """Reply with its sorted children."""

    children: list["ReplyNodeItem"] = []


class FlatReplyItem(BaseModel):
    """Reply placed at a capped display level."""

    reply: ReplyItem
    level: int


def to_reply_item(
    reply: Reply,
    topic: Topic | None = None,
    score: int = 0,
    user_vote: VoteValue = VoteValue.NONE,
    viewer: Actor | None = None,
) -> ReplyItem:
    """Build the viewer-facing item for a reply.

    Hidden content is masked unless the viewer is a moderator. Tombstones
    already carry their placeholder content.
    """
    content = reply.content
    if reply.is_hidden and not reply.is_deleted and not (viewer and viewer.is_moderator):
        content = HIDDEN_CONTENT

    return ReplyItem(
        reply_id=str(reply.id),
        topic_id=str(reply.topic_id),
        parent_reply_id=str(reply.parent_reply_id) if reply.parent_reply_id else None,
        author_id=str(reply.author_id),
        content=content,
        quoted_reply_id=str(reply.quoted_reply_id) if reply.quoted_reply_id else None,
        created_at=reply.created_at,
        edited_at=reply.edited_at,
        is_deleted=reply.is_deleted,
        is_hidden=reply.is_hidden,
        is_accepted=topic.is_accepted(reply.id) if topic else False,
        score=score,
        user_vote=int(user_vote),
    )
