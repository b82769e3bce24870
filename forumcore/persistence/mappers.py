"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from forumcore.domain.model import Reply, ReplyEdit, Topic, Vote
from forumcore.domain.value import (
    ReplyEditId,
    ReplyId,
    SubjectType,
    TopicId,
    TopicType,
    UserId,
    VoteId,
    VoteValue,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def _optional_uuid(value: Any) -> UUID | None:
    return _uuid(value) if value is not None else None


def row_to_topic(row: Dict[str, Any]) -> Topic:
    """Convert database row to Topic domain model.

    Args:
        row: Database row as dict

    Returns:
        Topic domain model
    """
    accepted = _optional_uuid(row.get("accepted_answer_id"))
    return Topic(
        id=TopicId(_uuid(row["id"])),
        type=TopicType(row["type"]),
        title=row["title"],
        author_id=UserId(_uuid(row["author_id"])),
        is_locked=row["is_locked"],
        is_pinned=row["is_pinned"],
        accepted_answer_id=ReplyId(accepted) if accepted else None,
        created_at=row["created_at"],
    )


def topic_to_dict(topic: Topic) -> Dict[str, Any]:
    """Convert Topic domain model to database dict."""
    data = topic.model_dump()
    data["type"] = topic.type.value
    return data


def row_to_reply(row: Dict[str, Any]) -> Reply:
    """Convert database row to Reply domain model.

    Args:
        row: Database row as dict

    Returns:
        Reply domain model
    """
    parent = _optional_uuid(row.get("parent_reply_id"))
    quoted = _optional_uuid(row.get("quoted_reply_id"))
    return Reply(
        id=ReplyId(_uuid(row["id"])),
        topic_id=TopicId(_uuid(row["topic_id"])),
        parent_reply_id=ReplyId(parent) if parent else None,
        author_id=UserId(_uuid(row["author_id"])),
        content=row["content"],
        quoted_reply_id=ReplyId(quoted) if quoted else None,
        created_at=row["created_at"],
        edited_at=row.get("edited_at"),
        is_deleted=row["is_deleted"],
        deleted_at=row.get("deleted_at"),
        is_hidden=row["is_hidden"],
    )


def reply_to_dict(reply: Reply) -> Dict[str, Any]:
    """Convert Reply domain model to database dict."""
    return reply.model_dump()


def row_to_reply_edit(row: Dict[str, Any]) -> ReplyEdit:
    """Convert database row to ReplyEdit domain model."""
    return ReplyEdit(
        id=ReplyEditId(_uuid(row["id"])),
        reply_id=ReplyId(_uuid(row["reply_id"])),
        editor_id=UserId(_uuid(row["editor_id"])),
        previous_content=row["previous_content"],
        reason=row.get("reason"),
        is_moderation=row["is_moderation"],
        edited_at=row["edited_at"],
    )


def reply_edit_to_dict(edit: ReplyEdit) -> Dict[str, Any]:
    """Convert ReplyEdit domain model to database dict."""
    return edit.model_dump()


def row_to_vote(row: Dict[str, Any]) -> Vote:
    """Convert database row to Vote domain model.

    Args:
        row: Database row as dict

    Returns:
        Vote domain model
    """
    return Vote(
        id=VoteId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        subject_type=SubjectType(row["subject_type"]),
        subject_id=_uuid(row["subject_id"]),
        value=VoteValue(row["value"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def vote_to_dict(vote: Vote) -> Dict[str, Any]:
    """Convert Vote domain model to database dict.

    Enums are stored by value: subject_type as its label, value as -1/1.
    """
    data = vote.model_dump()
    data["subject_type"] = vote.subject_type.value
    data["value"] = int(vote.value)
    return data
