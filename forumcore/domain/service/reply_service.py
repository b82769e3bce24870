"""Reply domain service."""

from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

import logfire

from forumcore.config import ForumSettings
from forumcore.domain.error import (
    ContentDeletedError,
    ContentTooLongError,
    ContentTooShortError,
    EditWindowExpiredError,
    NotAuthorError,
    NotAuthorizedError,
    NotFoundError,
    ParentNotFoundError,
    QuotedReplyNotFoundError,
    ReplyTooDeepError,
    StructuralInvariantError,
    TopicLockedError,
)
from forumcore.domain.model.reply import TOMBSTONE_CONTENT, Reply
from forumcore.domain.model.reply_edit import ReplyEdit
from forumcore.domain.model.topic import Topic
from forumcore.domain.repository import ReplyRepository, TopicRepository
from forumcore.domain.value import Actor, ReplyEditId, ReplyId, TopicId, UserId
from forumcore.util.clock import Clock, utc_now

from .base import Service


def is_within_edit_window(reply: Reply, now: datetime, window: timedelta) -> bool:
    """Whether the author may still edit the reply at `now`.

    Args:
        reply: The reply
        now: Current time
        window: Edit window length

    Returns:
        True if now - created_at < window and the reply is not deleted
    """
    return not reply.is_deleted and now - reply.created_at < window


class ReplyService(Service):
    """Domain service for reply operations."""

    def __init__(
        self,
        reply_repository: ReplyRepository,
        topic_repository: TopicRepository,
        forum_settings: ForumSettings,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize reply service.

        Args:
            reply_repository: Reply repository
            topic_repository: Topic repository
            forum_settings: Edit window and content length rules
            clock: Source of the current time
        """
        self.reply_repository = reply_repository
        self.topic_repository = topic_repository
        self.settings = forum_settings
        self.clock = clock

    @property
    def edit_window(self) -> timedelta:
        return timedelta(minutes=self.settings.edit_window_minutes)

    async def create_reply(
        self,
        topic_id: TopicId,
        actor: Actor,
        content: str,
        parent_reply_id: ReplyId | None = None,
        quoted_reply_id: ReplyId | None = None,
    ) -> Reply:
        """Create a top-level reply or a reply to another reply.

        Args:
            topic_id: Topic ID
            actor: Author
            content: Reply text
            parent_reply_id: Parent reply ID (None for top-level)
            quoted_reply_id: Reply being quoted, if any

        Returns:
            Created reply

        Raises:
            ContentTooShortError, ContentTooLongError: Content length out of bounds
            NotFoundError: Topic does not exist
            TopicLockedError: Topic is locked
            ParentNotFoundError: Parent missing or in another topic
            ReplyTooDeepError: Parent already sits at forum.max_reply_depth
            QuotedReplyNotFoundError: Quoted reply missing or in another topic
        """
        with logfire.span(
            "reply_service.create_reply",
            topic_id=str(topic_id),
            author_id=str(actor.user_id),
            parent_reply_id=str(parent_reply_id) if parent_reply_id else None,
        ):
            self._validate_content(content)

            topic = await self._get_topic(topic_id)
            if topic.is_locked:
                logfire.warn("Reply to locked topic", topic_id=str(topic_id))
                raise TopicLockedError(str(topic_id))

            if parent_reply_id:
                parent = await self.reply_repository.find_by_id(parent_reply_id)
                if not parent or parent.topic_id != topic_id:
                    logfire.warn(
                        "Parent reply not found in topic",
                        parent_reply_id=str(parent_reply_id),
                        topic_id=str(topic_id),
                    )
                    raise ParentNotFoundError(str(parent_reply_id))

                max_depth = self.settings.max_reply_depth
                if max_depth is not None:
                    thread = await self.reply_repository.find_by_topic(topic_id)
                    depth = len(self._ancestor_chain(parent.id, thread))
                    if depth > max_depth:
                        logfire.warn(
                            "Reply nested too deep",
                            parent_reply_id=str(parent_reply_id),
                            depth=depth,
                            max_depth=max_depth,
                        )
                        raise ReplyTooDeepError(max_depth)

            if quoted_reply_id:
                quoted = await self.reply_repository.find_by_id(quoted_reply_id)
                if not quoted or quoted.topic_id != topic_id:
                    logfire.warn(
                        "Quoted reply not found in topic",
                        quoted_reply_id=str(quoted_reply_id),
                        topic_id=str(topic_id),
                    )
                    raise QuotedReplyNotFoundError(str(quoted_reply_id))

            reply = Reply(
                id=ReplyId(uuid4()),
                topic_id=topic_id,
                parent_reply_id=parent_reply_id,
                author_id=UserId(actor.user_id),
                content=content,
                quoted_reply_id=quoted_reply_id,
                created_at=self.clock(),
            )

            saved = await self.reply_repository.save(reply)
            logfire.info(
                "Reply created",
                reply_id=str(saved.id),
                topic_id=str(topic_id),
                author_id=str(actor.user_id),
            )
            return saved

    async def get_reply(self, reply_id: ReplyId) -> Reply:
        """Get a reply by ID.

        Raises:
            NotFoundError: If the reply does not exist
        """
        reply = await self.reply_repository.find_by_id(reply_id)
        if not reply:
            logfire.warn("Reply not found", reply_id=str(reply_id))
            raise NotFoundError("Reply", str(reply_id))
        return reply

    async def list_by_topic(self, topic_id: TopicId) -> list[Reply]:
        """Get all replies of a topic as a flat list, tombstones included.

        Raises:
            NotFoundError: If the topic does not exist
        """
        with logfire.span("reply_service.list_by_topic", topic_id=str(topic_id)):
            await self._get_topic(topic_id)
            replies = await self.reply_repository.find_by_topic(topic_id)
            logfire.info(
                "Replies retrieved for topic", topic_id=str(topic_id), count=len(replies)
            )
            return replies

    async def update_reply(
        self,
        reply_id: ReplyId,
        actor: Actor,
        content: str,
        reason: Optional[str] = None,
    ) -> Reply:
        """Replace the content of a reply.

        Authors may edit inside the edit window; moderators may edit at any
        time. A moderator editing someone else's reply is recorded as a
        moderation edit with the given reason.

        Raises:
            NotFoundError: Reply does not exist
            ContentDeletedError: Reply is soft-deleted
            NotAuthorError: Actor is neither author nor moderator
            EditWindowExpiredError: Author edit after the window closed
            ContentTooShortError, ContentTooLongError: Content length out of bounds
        """
        with logfire.span(
            "reply_service.update_reply",
            reply_id=str(reply_id),
            user_id=str(actor.user_id),
            text_length=len(content),
        ):
            reply = await self.get_reply(reply_id)

            if reply.is_deleted:
                logfire.warn("Attempt to edit deleted reply", reply_id=str(reply_id))
                raise ContentDeletedError("Reply", str(reply_id))

            is_author = reply.is_authored_by(UserId(actor.user_id))
            if not is_author and not actor.is_moderator:
                logfire.warn(
                    "Unauthorized reply edit attempt",
                    reply_id=str(reply_id),
                    user_id=str(actor.user_id),
                )
                raise NotAuthorError("reply", str(reply_id), str(actor.user_id))

            now = self.clock()
            if not actor.is_moderator and not is_within_edit_window(
                reply, now, self.edit_window
            ):
                logfire.warn(
                    "Edit window expired",
                    reply_id=str(reply_id),
                    created_at=reply.created_at.isoformat(),
                )
                raise EditWindowExpiredError(
                    str(reply_id), self.settings.edit_window_minutes
                )

            self._validate_content(content)

            await self.reply_repository.save_edit(
                ReplyEdit(
                    id=ReplyEditId(uuid4()),
                    reply_id=reply_id,
                    editor_id=UserId(actor.user_id),
                    previous_content=reply.content,
                    reason=reason,
                    is_moderation=actor.is_moderator and not is_author,
                    edited_at=now,
                )
            )
            updated = await self.reply_repository.save(
                reply.model_copy(update={"content": content, "edited_at": now})
            )
            logfire.info(
                "Reply content updated",
                reply_id=str(reply_id),
                moderation=actor.is_moderator and not is_author,
            )
            return updated

    async def soft_delete(self, reply_id: ReplyId, actor: Actor) -> Reply:
        """Replace a reply with a tombstone, keeping it in the tree.

        Raises:
            NotFoundError: Reply does not exist
            NotAuthorError: Actor is neither author nor moderator
            ContentDeletedError: Reply is already deleted
        """
        with logfire.span(
            "reply_service.soft_delete",
            reply_id=str(reply_id),
            user_id=str(actor.user_id),
        ):
            reply = await self.get_reply(reply_id)

            if not reply.is_authored_by(UserId(actor.user_id)) and not actor.is_moderator:
                logfire.warn(
                    "Unauthorized reply delete attempt",
                    reply_id=str(reply_id),
                    user_id=str(actor.user_id),
                )
                raise NotAuthorError("reply", str(reply_id), str(actor.user_id))

            if reply.is_deleted:
                raise ContentDeletedError("Reply", str(reply_id))

            deleted = await self.reply_repository.save(
                reply.model_copy(
                    update={
                        "content": TOMBSTONE_CONTENT,
                        "is_deleted": True,
                        "deleted_at": self.clock(),
                    }
                )
            )
            logfire.info("Reply soft-deleted", reply_id=str(reply_id))
            return deleted

    async def set_hidden(self, reply_id: ReplyId, actor: Actor, hidden: bool) -> Reply:
        """Hide or unhide a reply (moderators only).

        Raises:
            NotAuthorizedError: Actor is not a moderator
            NotFoundError: Reply does not exist
        """
        action = "hide" if hidden else "unhide"
        with logfire.span(
            f"reply_service.{action}", reply_id=str(reply_id), user_id=str(actor.user_id)
        ):
            if not actor.is_moderator:
                logfire.warn(
                    "Non-moderator hide attempt",
                    reply_id=str(reply_id),
                    user_id=str(actor.user_id),
                )
                raise NotAuthorizedError(
                    action, "reply", str(reply_id), str(actor.user_id)
                )

            reply = await self.get_reply(reply_id)
            if reply.is_hidden == hidden:
                return reply

            updated = await self.reply_repository.save(
                reply.model_copy(update={"is_hidden": hidden})
            )
            logfire.info("Reply visibility changed", reply_id=str(reply_id), hidden=hidden)
            return updated

    async def move_reply(
        self,
        reply_id: ReplyId,
        new_parent_id: ReplyId | None,
        actor: Actor,
    ) -> Reply:
        """Reparent a reply within its topic (moderators only).

        Raises:
            NotAuthorizedError: Actor is not a moderator
            NotFoundError: Reply does not exist
            ParentNotFoundError: New parent missing or in another topic
            StructuralInvariantError: New parent is the reply or one of its
                descendants
        """
        with logfire.span(
            "reply_service.move_reply",
            reply_id=str(reply_id),
            new_parent_id=str(new_parent_id) if new_parent_id else None,
        ):
            if not actor.is_moderator:
                raise NotAuthorizedError(
                    "move", "reply", str(reply_id), str(actor.user_id)
                )

            reply = await self.get_reply(reply_id)

            if new_parent_id is not None:
                parent = await self.reply_repository.find_by_id(new_parent_id)
                if not parent or parent.topic_id != reply.topic_id:
                    raise ParentNotFoundError(str(new_parent_id))

                siblings = await self.reply_repository.find_by_topic(reply.topic_id)
                if reply_id in self._ancestor_chain(new_parent_id, siblings):
                    logfire.error(
                        "Reparenting would create a cycle",
                        reply_id=str(reply_id),
                        new_parent_id=str(new_parent_id),
                    )
                    raise StructuralInvariantError(
                        f"Reply {reply_id} cannot be moved under its own descendant "
                        f"{new_parent_id}"
                    )

            moved = await self.reply_repository.save(
                reply.model_copy(update={"parent_reply_id": new_parent_id})
            )
            logfire.info("Reply moved", reply_id=str(reply_id))
            return moved

    async def get_edit_history(self, reply_id: ReplyId, actor: Actor) -> list[ReplyEdit]:
        """Edit history of a reply (moderators only).

        Raises:
            NotAuthorizedError: Actor is not a moderator
            NotFoundError: Reply does not exist
        """
        if not actor.is_moderator:
            raise NotAuthorizedError(
                "view edit history of", "reply", str(reply_id), str(actor.user_id)
            )
        await self.get_reply(reply_id)
        return await self.reply_repository.find_edits(reply_id)

    async def _get_topic(self, topic_id: TopicId) -> Topic:
        topic = await self.topic_repository.find_by_id(topic_id)
        if not topic:
            logfire.warn("Topic not found", topic_id=str(topic_id))
            raise NotFoundError("Topic", str(topic_id))
        return topic

    @staticmethod
    def _ancestor_chain(start: ReplyId, replies: list[Reply]) -> list[ReplyId]:
        """IDs from `start` up to its root, `start` included."""
        parents = {r.id: r.parent_reply_id for r in replies}
        chain: list[ReplyId] = []
        current: ReplyId | None = start
        while current is not None:
            if current in chain:
                raise StructuralInvariantError(f"Parent cycle through reply {current}")
            chain.append(current)
            current = parents.get(current)
        return chain

    def _validate_content(self, content: str) -> None:
        length = len(content.strip())
        if length < self.settings.reply_min_length:
            raise ContentTooShortError("Reply content", self.settings.reply_min_length)
        if length > self.settings.reply_max_length:
            raise ContentTooLongError("Reply content", self.settings.reply_max_length)
