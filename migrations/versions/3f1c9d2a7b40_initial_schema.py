"""initial_schema

Create the forum engine schema:
- Topics (discussion, question, announcement; one accepted answer at most)
- Replies (adjacency list, soft-deleted replies stay as tombstones)
- Reply edits (content history)
- Votes (+1/-1 ledger; scores are sums, never stored)

Revision ID: 3f1c9d2a7b40
Revises:
Create Date: 2026-10-19 10:12:44.518302

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c9d2a7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE topic_type AS ENUM ('discussion', 'question', 'announcement');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE subject_type AS ENUM ('topic', 'reply');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # TOPICS table
    # ========================================================================
    op.create_table(
        "topics",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column(
            "type",
            postgresql.ENUM(name="topic_type", create_type=False),
            nullable=False,
            server_default="discussion",
        ),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("is_locked", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("accepted_answer_id", sa.UUID(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "accepted_answer_id IS NULL OR type = 'question'",
            name="accepted_answer_only_on_questions",
        ),
    )
    op.create_index("idx_topics_author_id", "topics", ["author_id"])

    # ========================================================================
    # REPLIES table
    # ========================================================================
    op.create_table(
        "replies",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("topic_id", sa.UUID(), nullable=False),
        sa.Column("parent_reply_id", sa.UUID(), nullable=True),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("quoted_reply_id", sa.UUID(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("edited_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("is_hidden", sa.Boolean(), nullable=False, server_default="false"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["topic_id"], ["topics.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["parent_reply_id"], ["replies.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["quoted_reply_id"], ["replies.id"], ondelete="SET NULL"
        ),
        sa.CheckConstraint(
            "parent_reply_id IS NULL OR parent_reply_id <> id", name="no_self_parent"
        ),
    )
    op.create_index("idx_replies_topic_id", "replies", ["topic_id", "created_at"])
    op.create_index("idx_replies_parent_reply_id", "replies", ["parent_reply_id"])

    # Circular reference: topics -> replies added once both tables exist
    op.create_foreign_key(
        "fk_topics_accepted_answer",
        "topics",
        "replies",
        ["accepted_answer_id"],
        ["id"],
        ondelete="SET NULL",
    )

    # ========================================================================
    # REPLY_EDITS table
    # ========================================================================
    op.create_table(
        "reply_edits",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("reply_id", sa.UUID(), nullable=False),
        sa.Column("editor_id", sa.UUID(), nullable=False),
        sa.Column("previous_content", sa.Text(), nullable=False),
        sa.Column("reason", sa.String(500), nullable=True),
        sa.Column(
            "is_moderation", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column(
            "edited_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["reply_id"], ["replies.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_reply_edits_reply_id", "reply_edits", ["reply_id"])

    # ========================================================================
    # VOTES table
    # ========================================================================
    op.create_table(
        "votes",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column(
            "subject_type",
            postgresql.ENUM(name="subject_type", create_type=False),
            nullable=False,
        ),
        sa.Column("subject_id", sa.UUID(), nullable=False),
        sa.Column("value", sa.SmallInteger(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "subject_type", "subject_id", "user_id", name="unique_vote"
        ),
        sa.CheckConstraint("value IN (-1, 1)", name="vote_value_is_up_or_down"),
    )
    op.create_index("idx_votes_user_id", "votes", ["user_id"])
    op.create_index("idx_votes_subject", "votes", ["subject_type", "subject_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("votes")
    op.drop_table("reply_edits")
    op.drop_constraint("fk_topics_accepted_answer", "topics", type_="foreignkey")
    op.drop_table("replies")
    op.drop_table("topics")

    op.execute("DROP TYPE IF EXISTS subject_type")
    op.execute("DROP TYPE IF EXISTS topic_type")
