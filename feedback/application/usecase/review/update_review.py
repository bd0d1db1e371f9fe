"""Update review use case."""

from uuid import UUID

from pydantic import BaseModel

from feedback.domain.model import Identity
from feedback.domain.service import ReviewService
from feedback.domain.value import ReviewId

from .common import ReviewItem, to_review_item


class UpdateReviewRequest(BaseModel):
    """Update review request.

    Omitted fields keep their current value.
    """

    identity: Identity  # Must be the author
    review_id: UUID
    rating: int | None = None
    title: str | None = None
    comment: str | None = None


class UpdateReviewUseCase:
    """Use case for an author editing their review."""

    def __init__(self, review_service: ReviewService) -> None:
        """Initialize update review use case.

        Args:
            review_service: Review domain service
        """
        self.review_service = review_service

    async def execute(self, request: UpdateReviewRequest) -> ReviewItem:
        """Execute update review flow.

        Raises:
            NotFoundError: If the review does not exist
            AuthorizationError: If the caller is not the author or the review
                is deleted
            ValidationError: If the merged fields are invalid
        """
        review = await self.review_service.update_review(
            identity=request.identity,
            review_id=ReviewId(request.review_id),
            rating=request.rating,
            title=request.title,
            comment=request.comment,
        )
        return to_review_item(review)
