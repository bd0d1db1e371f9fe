"""Response items shared by review use cases."""

from datetime import datetime

from pydantic import BaseModel

from feedback.domain.model import Review
from feedback.domain.value import ReviewStatus, TargetType


class ReplyItem(BaseModel):
    """Moderator reply in response."""

    moderator_id: str
    message: str
    created_at: datetime


class ReviewItem(BaseModel):
    """Review in response."""

    review_id: str
    sequence_number: int
    author_id: str
    author_name: str
    target_type: TargetType
    target_key: str
    target_name: str
    rating: int
    title: str | None
    comment: str
    status: ReviewStatus
    replies: list[ReplyItem]
    reply_count: int
    created_at: datetime
    updated_at: datetime


def to_review_item(review: Review) -> ReviewItem:
    """Convert a Review domain model into its response item."""
    return ReviewItem(
        review_id=str(review.id),
        sequence_number=review.sequence_number,
        author_id=str(review.author_id),
        author_name=review.author_name,
        target_type=review.target_type,
        target_key=review.target_key,
        target_name=review.target_name,
        rating=review.rating,
        title=review.title,
        comment=review.comment,
        status=review.status,
        replies=[
            ReplyItem(
                moderator_id=str(reply.moderator_id),
                message=reply.message,
                created_at=reply.created_at,
            )
            for reply in review.replies
        ],
        reply_count=review.reply_count,
        created_at=review.created_at,
        updated_at=review.updated_at,
    )
