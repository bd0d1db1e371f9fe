"""initial_review_schema

Create the review store:
- Reviews (one live review per author and target, soft-deleted via status)
- Review replies (append-only moderator replies)
- Display sequence shared by all reviews

Revision ID: 3f2a9c41d7e0
Revises:
Create Date: 2026-10-18 09:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f2a9c41d7e0"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE review_status AS ENUM ('public', 'hidden', 'deleted');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE review_target_type AS ENUM ('Product', 'Hardware', 'Vendor', 'Ticket');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("CREATE SEQUENCE IF NOT EXISTS review_sequence_number_seq")

    # ========================================================================
    # REVIEWS TABLE
    # ========================================================================
    op.create_table(
        "reviews",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("sequence_number", sa.BigInteger(), nullable=False),
        sa.Column("author_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("author_name", sa.String(120), nullable=False),
        sa.Column(
            "target_type",
            postgresql.ENUM(name="review_target_type", create_type=False),
            nullable=False,
        ),
        sa.Column("target_key", sa.String(120), nullable=False),
        sa.Column("target_name", sa.String(300), nullable=False),
        sa.Column("rating", sa.SmallInteger(), nullable=False),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("comment", sa.Text(), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(name="review_status", create_type=False),
            nullable=False,
            server_default="public",
        ),
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
        sa.UniqueConstraint("sequence_number", name="uq_reviews_sequence_number"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="rating_range"),
        sa.CheckConstraint(
            "char_length(comment) BETWEEN 5 AND 3000", name="comment_length"
        ),
    )

    op.create_index(
        "idx_reviews_created_at",
        "reviews",
        [sa.text("created_at DESC")],
    )
    op.create_index("idx_reviews_author_id", "reviews", ["author_id"])
    op.create_index("idx_reviews_target_key", "reviews", ["target_key"])
    op.create_index("idx_reviews_status", "reviews", ["status"])
    op.create_index(
        "uq_reviews_author_target_active",
        "reviews",
        ["author_id", "target_type", "target_key"],
        unique=True,
        postgresql_where=sa.text("status <> 'deleted'"),
    )

    # ========================================================================
    # REVIEW REPLIES TABLE
    # ========================================================================
    op.create_table(
        "review_replies",
        sa.Column(
            "review_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("reviews.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("moderator_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.UniqueConstraint("review_id", "position", name="uq_review_reply_position"),
    )

    op.create_index(
        "idx_review_replies_review_id", "review_replies", ["review_id"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_review_replies_review_id", table_name="review_replies")
    op.drop_table("review_replies")

    op.drop_index("uq_reviews_author_target_active", table_name="reviews")
    op.drop_index("idx_reviews_status", table_name="reviews")
    op.drop_index("idx_reviews_target_key", table_name="reviews")
    op.drop_index("idx_reviews_author_id", table_name="reviews")
    op.drop_index("idx_reviews_created_at", table_name="reviews")
    op.drop_table("reviews")

    op.execute("DROP SEQUENCE IF EXISTS review_sequence_number_seq")
    op.execute("DROP TYPE IF EXISTS review_target_type")
    op.execute("DROP TYPE IF EXISTS review_status")
