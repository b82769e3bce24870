"""In-memory reply repository for testing."""

from typing import Optional

from forumcore.domain.model.reply import Reply
from forumcore.domain.model.reply_edit import ReplyEdit
from forumcore.domain.repository.reply import ReplyRepository
from forumcore.domain.value import ReplyId, TopicId

from .store import InMemoryDatabase


class InMemoryReplyRepository(ReplyRepository):
    """In-memory implementation of ReplyRepository for testing."""

    def __init__(self, db: InMemoryDatabase | None = None) -> None:
        self._db = db or InMemoryDatabase()

    async def find_by_id(self, reply_id: ReplyId) -> Optional[Reply]:
        """Find a reply by ID."""
        return self._db.replies.get(reply_id)

    async def find_by_topic(self, topic_id: TopicId) -> list[Reply]:
        """Find all replies of a topic in creation order."""
        replies = [r for r in self._db.replies.values() if r.topic_id == topic_id]
        return sorted(replies, key=lambda r: (r.created_at, r.id))

    async def save(self, reply: Reply) -> Reply:
        """Save a reply."""
        self._db.replies[reply.id] = reply
        return reply

    async def save_edit(self, edit: ReplyEdit) -> ReplyEdit:
        """Append an edit history entry."""
        self._db.reply_edits.append(edit)
        return edit

    async def find_edits(self, reply_id: ReplyId) -> list[ReplyEdit]:
        """Edit history of a reply, oldest first."""
        edits = [e for e in self._db.reply_edits if e.reply_id == reply_id]
        return sorted(edits, key=lambda e: e.edited_at)
