"""SQLAlchemy table definitions for the forum engine.

Core tables only; rows are mapped to pydantic domain models by hand in
mappers.py. They match the schema defined in Alembic migrations.

Users live in an external identity service, so user columns carry plain
UUIDs without foreign keys.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Enum,
    ForeignKey,
    Index,
    MetaData,
    SmallInteger,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# TOPICS TABLE
# ============================================================================
topics_table = Table(
    "topics",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "type",
        Enum(
            "discussion", "question", "announcement", name="topic_type", create_type=False
        ),
        nullable=False,
        server_default="discussion",
    ),
    Column("title", String(300), nullable=False),
    Column("author_id", UUID, nullable=False),
    Column("is_locked", Boolean, nullable=False, server_default="false"),
    Column("is_pinned", Boolean, nullable=False, server_default="false"),
    # Only AcceptanceService writes this column
    Column(
        "accepted_answer_id",
        UUID,
        ForeignKey(
            "replies.id",
            ondelete="SET NULL",
            use_alter=True,
            name="fk_topics_accepted_answer",
        ),
        nullable=True,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint(
        "accepted_answer_id IS NULL OR type = 'question'",
        name="accepted_answer_only_on_questions",
    ),
)

Index("idx_topics_author_id", topics_table.c.author_id)

# ============================================================================
# REPLIES TABLE (adjacency list; tombstones stay in place)
# ============================================================================
replies_table = Table(
    "replies",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("topic_id", UUID, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False),
    Column(
        "parent_reply_id",
        UUID,
        ForeignKey("replies.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column("author_id", UUID, nullable=False),
    Column("content", Text, nullable=False),
    Column(
        "quoted_reply_id",
        UUID,
        ForeignKey("replies.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("edited_at", TIMESTAMP(timezone=True), nullable=True),
    Column("is_deleted", Boolean, nullable=False, server_default="false"),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    Column("is_hidden", Boolean, nullable=False, server_default="false"),
    CheckConstraint("parent_reply_id IS NULL OR parent_reply_id <> id", name="no_self_parent"),
)

Index("idx_replies_topic_id", replies_table.c.topic_id, replies_table.c.created_at)
Index("idx_replies_parent_reply_id", replies_table.c.parent_reply_id)

# ============================================================================
# REPLY EDITS TABLE (edit history)
# ============================================================================
reply_edits_table = Table(
    "reply_edits",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column(
        "reply_id", UUID, ForeignKey("replies.id", ondelete="CASCADE"), nullable=False
    ),
    Column("editor_id", UUID, nullable=False),
    Column("previous_content", Text, nullable=False),
    Column("reason", String(500), nullable=True),
    Column("is_moderation", Boolean, nullable=False, server_default="false"),
    Column(
        "edited_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_reply_edits_reply_id", reply_edits_table.c.reply_id)

# ============================================================================
# VOTES TABLE (the ledger; scores are SUM(value))
# ============================================================================
votes_table = Table(
    "votes",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, nullable=False),
    Column(
        "subject_type",
        Enum("topic", "reply", name="subject_type", create_type=False),
        nullable=False,
    ),
    Column("subject_id", UUID, nullable=False),
    Column("value", SmallInteger, nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("subject_type", "subject_id", "user_id", name="unique_vote"),
    CheckConstraint("value IN (-1, 1)", name="vote_value_is_up_or_down"),
)

Index("idx_votes_user_id", votes_table.c.user_id)
Index("idx_votes_subject", votes_table.c.subject_type, votes_table.c.subject_id)
