"""Review aggregate.

A review belongs to exactly one author and one target. Content changes only
through its author while it is not deleted; status changes go through the
visibility state machine; moderator replies are append-only.
"""

from datetime import datetime, timezone

from pydantic import Field, computed_field

from feedback.domain.model.common import DomainModel
from feedback.domain.value import ReviewId, ReviewStatus, TargetType, UserId


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Reply(DomainModel):
    """Moderator reply attached to a review. Immutable once created."""

    moderator_id: UserId
    message: str = Field(min_length=1, max_length=2000)
    created_at: datetime = Field(default_factory=utcnow)


class Review(DomainModel):
    """Review aggregate root."""

    id: ReviewId
    sequence_number: int = Field(ge=1)

    # Author
    author_id: UserId
    author_name: str = Field(default="Guest", max_length=120)

    # Target
    target_type: TargetType = TargetType.PRODUCT
    target_key: str = Field(min_length=1, max_length=120)
    target_name: str = Field(default="", max_length=300)

    # Content
    rating: int = Field(ge=1, le=5)
    title: str | None = Field(default=None, max_length=200)
    comment: str = Field(min_length=5, max_length=3000)

    status: ReviewStatus = ReviewStatus.PUBLIC
    replies: tuple[Reply, ...] = ()

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def reply_count(self) -> int:
        return len(self.replies)

    @property
    def is_deleted(self) -> bool:
        return self.status == ReviewStatus.DELETED
