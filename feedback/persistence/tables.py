"""SQLAlchemy table definitions for the review store.

These table definitions are used with SQLAlchemy Core. They match the
schema defined in Alembic migrations.
"""

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Sequence,
    SmallInteger,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

review_status_enum = postgresql.ENUM(
    "public", "hidden", "deleted", name="review_status", create_type=False
)
target_type_enum = postgresql.ENUM(
    "Product", "Hardware", "Vendor", "Ticket", name="review_target_type", create_type=False
)

# Display counter shared by all reviews
review_sequence = Sequence("review_sequence_number_seq", metadata=metadata)

# ============================================================================
# REVIEWS TABLE
# ============================================================================
reviews_table = Table(
    "reviews",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("sequence_number", BigInteger, nullable=False, unique=True),
    Column("author_id", UUID(as_uuid=True), nullable=False),
    Column("author_name", String(120), nullable=False),  # Snapshot at creation
    Column("target_type", target_type_enum, nullable=False),
    Column("target_key", String(120), nullable=False),
    Column("target_name", String(300), nullable=False),  # Snapshot at creation
    Column("rating", SmallInteger, nullable=False),
    Column("title", String(200), nullable=True),
    Column("comment", Text, nullable=False),
    Column("status", review_status_enum, nullable=False, server_default="public"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("rating BETWEEN 1 AND 5", name="rating_range"),
    CheckConstraint(
        "char_length(comment) BETWEEN 5 AND 3000", name="comment_length"
    ),
)

Index("idx_reviews_created_at", reviews_table.c.created_at.desc())
Index("idx_reviews_author_id", reviews_table.c.author_id)
Index("idx_reviews_target_key", reviews_table.c.target_key)
Index("idx_reviews_status", reviews_table.c.status)
# One live review per author and target; deleted reviews are ignored
ACTIVE_REVIEW_INDEX = "uq_reviews_author_target_active"
Index(
    ACTIVE_REVIEW_INDEX,
    reviews_table.c.author_id,
    reviews_table.c.target_type,
    reviews_table.c.target_key,
    unique=True,
    postgresql_where=text("status <> 'deleted'"),
)

# ============================================================================
# REVIEW REPLIES TABLE (append-only)
# ============================================================================
review_replies_table = Table(
    "review_replies",
    metadata,
    Column(
        "review_id",
        UUID(as_uuid=True),
        ForeignKey("reviews.id", ondelete="RESTRICT"),
        nullable=False,
    ),
    Column("position", Integer, nullable=False),  # 0-based insertion order
    Column("moderator_id", UUID(as_uuid=True), nullable=False),
    Column("message", Text, nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("review_id", "position", name="uq_review_reply_position"),
)

Index("idx_review_replies_review_id", review_replies_table.c.review_id)
