"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict, Iterable
from uuid import UUID

from feedback.domain.model import Reply, Review
from feedback.domain.value import ReviewId, ReviewStatus, TargetType, UserId


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_reply(row: Dict[str, Any]) -> Reply:
    """Convert database row to Reply domain model.

    Args:
        row: Database row as dict

    Returns:
        Reply domain model
    """
    return Reply(
        moderator_id=UserId(_uuid(row["moderator_id"])),
        message=row["message"],
        created_at=row["created_at"],
    )


def row_to_review(row: Dict[str, Any], replies: Iterable[Reply] = ()) -> Review:
    """Convert database row to Review domain model.

    Args:
        row: Review row as dict
        replies: Replies already ordered by position

    Returns:
        Review domain model
    """
    return Review(
        id=ReviewId(_uuid(row["id"])),
        sequence_number=row["sequence_number"],
        author_id=UserId(_uuid(row["author_id"])),
        author_name=row["author_name"],
        target_type=TargetType(row["target_type"]),
        target_key=row["target_key"],
        target_name=row["target_name"],
        rating=row["rating"],
        title=row.get("title"),
        comment=row["comment"],
        status=ReviewStatus(row["status"]),
        replies=tuple(replies),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def review_to_dict(review: Review) -> Dict[str, Any]:
    """Convert Review domain model to a reviews-table dict.

    Replies live in their own table and are excluded.

    Args:
        review: Review domain model

    Returns:
        Dict suitable for database insertion
    """
    return {
        "id": review.id,
        "sequence_number": review.sequence_number,
        "author_id": review.author_id,
        "author_name": review.author_name,
        "target_type": review.target_type.value,
        "target_key": review.target_key,
        "target_name": review.target_name,
        "rating": review.rating,
        "title": review.title,
        "comment": review.comment,
        "status": review.status.value,
        "created_at": review.created_at,
        "updated_at": review.updated_at,
    }


def reply_to_dict(review_id: ReviewId, position: int, reply: Reply) -> Dict[str, Any]:
    """Convert Reply domain model to a review_replies-table dict."""
    return {
        "review_id": review_id,
        "position": position,
        "moderator_id": reply.moderator_id,
        "message": reply.message,
        "created_at": reply.created_at,
    }
