"""Reply repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from forumcore.domain.model.reply import Reply
from forumcore.domain.model.reply_edit import ReplyEdit
from forumcore.domain.value import ReplyId, TopicId


class ReplyRepository(ABC):
    """Repository for Reply entity and its edit history."""

    @abstractmethod
    async def find_by_id(self, reply_id: ReplyId) -> Optional[Reply]:
        """Find a reply by ID.

        Args:
            reply_id: The reply's unique identifier

        Returns:
            The reply if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_topic(self, topic_id: TopicId) -> List[Reply]:
        """Find all replies of a topic, tombstones included.

        Replies come back flat, ordered by creation time. Thread shape and
        sort order are applied by the thread assembler.

        Args:
            topic_id: The topic ID

        Returns:
            Flat list of replies
        """
        pass

    @abstractmethod
    async def save(self, reply: Reply) -> Reply:
        """Save a reply (create or update).

        Args:
            reply: The reply to save

        Returns:
            The saved reply
        """
        pass

    @abstractmethod
    async def save_edit(self, edit: ReplyEdit) -> ReplyEdit:
        """Append an entry to a reply's edit history."""
        pass

    @abstractmethod
    async def find_edits(self, reply_id: ReplyId) -> List[ReplyEdit]:
        """Edit history of a reply, oldest first."""
        pass
