"""Assembled thread shapes.

Plain dataclasses rather than pydantic models: these are built in bulk on
every read and never persisted.
"""

from dataclasses import dataclass, field

from forumcore.domain.model.reply import Reply


@dataclass
class ThreadNode:
    """A reply with its score and its sorted children."""

    reply: Reply
    score: int = 0
    children: list["ThreadNode"] = field(default_factory=list)


@dataclass(frozen=True)
class FlatEntry:
    """A thread node placed at a capped display level."""

    node: ThreadNode
    level: int
