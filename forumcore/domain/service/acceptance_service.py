"""Accepted answer service."""

import logfire

from forumcore.domain.error import (
    ContentDeletedError,
    NotAuthorizedError,
    NotFoundError,
    NotQuestionTypeError,
    ReplyNotInTopicError,
)
from forumcore.domain.model.topic import Topic
from forumcore.domain.repository import ReplyRepository, TopicRepository
from forumcore.domain.value import Actor, ReplyId, TopicId, TopicType, UserId

from .base import Service


class AcceptanceService(Service):
    """Sole writer of Topic.accepted_answer_id.

    A question topic is either unanswered or points at exactly one reply.
    Accepting another reply overwrites the pointer in a single write, so the
    previous answer stops being accepted at the same instant.
    """

    def __init__(
        self,
        topic_repository: TopicRepository,
        reply_repository: ReplyRepository,
    ) -> None:
        self.topic_repository = topic_repository
        self.reply_repository = reply_repository

    async def accept(self, topic_id: TopicId, reply_id: ReplyId, actor: Actor) -> Topic:
        """Mark a reply as the accepted answer of a question topic.

        Args:
            topic_id: Question topic
            reply_id: Reply to accept
            actor: Topic author or moderator

        Returns:
            Updated topic

        Raises:
            NotFoundError: Topic does not exist
            NotQuestionTypeError: Topic is not a question
            NotAuthorizedError: Actor is neither topic author nor moderator
            ReplyNotInTopicError: Reply missing or in another topic
            ContentDeletedError: Reply is soft-deleted
        """
        with logfire.span(
            "acceptance_service.accept",
            topic_id=str(topic_id),
            reply_id=str(reply_id),
            user_id=str(actor.user_id),
        ):
            async with self.topic_repository.exclusive(topic_id) as topic:
                if topic is None:
                    logfire.warn("Topic not found", topic_id=str(topic_id))
                    raise NotFoundError("Topic", str(topic_id))

                if topic.type != TopicType.QUESTION:
                    logfire.warn("Accept on non-question topic", topic_id=str(topic_id))
                    raise NotQuestionTypeError(str(topic_id))

                if topic.author_id != UserId(actor.user_id) and not actor.is_moderator:
                    logfire.warn(
                        "Unauthorized accept attempt",
                        topic_id=str(topic_id),
                        user_id=str(actor.user_id),
                    )
                    raise NotAuthorizedError(
                        "accept an answer on", "topic", str(topic_id), str(actor.user_id)
                    )

                reply = await self.reply_repository.find_by_id(reply_id)
                if reply is None or reply.topic_id != topic_id:
                    logfire.warn(
                        "Accepted reply not in topic",
                        topic_id=str(topic_id),
                        reply_id=str(reply_id),
                    )
                    raise ReplyNotInTopicError(str(reply_id), str(topic_id))

                if reply.is_deleted:
                    raise ContentDeletedError("Reply", str(reply_id))

                if topic.is_accepted(reply_id):
                    return topic

                previous = topic.accepted_answer_id
                updated = await self.topic_repository.save(
                    topic.model_copy(update={"accepted_answer_id": reply_id})
                )

            logfire.info(
                "Answer accepted",
                topic_id=str(topic_id),
                reply_id=str(reply_id),
                previous_reply_id=str(previous) if previous else None,
            )
            return updated
