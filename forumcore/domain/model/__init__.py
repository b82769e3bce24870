"""Domain model entities for the forum engine."""

from forumcore.domain.model.reply import HIDDEN_CONTENT, TOMBSTONE_CONTENT, Reply
from forumcore.domain.model.reply_edit import ReplyEdit
from forumcore.domain.model.thread import FlatEntry, ThreadNode
from forumcore.domain.model.topic import Topic
from forumcore.domain.model.vote import Vote

__all__ = [
    "Topic",
    "Reply",
    "ReplyEdit",
    "Vote",
    "ThreadNode",
    "FlatEntry",
    "TOMBSTONE_CONTENT",
    "HIDDEN_CONTENT",
]
