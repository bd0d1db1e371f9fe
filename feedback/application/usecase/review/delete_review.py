"""Delete own review use case."""

from uuid import UUID

from pydantic import BaseModel

from feedback.domain.model import Identity
from feedback.domain.service import ReviewService
from feedback.domain.value import ReviewId, ReviewStatus


class DeleteReviewRequest(BaseModel):
    """Delete review request."""

    identity: Identity  # Must be the author
    review_id: UUID


class DeleteReviewResponse(BaseModel):
    """Delete review response."""

    review_id: str
    status: ReviewStatus


class DeleteReviewUseCase:
    """Use case for an author soft-deleting their own review."""

    def __init__(self, review_service: ReviewService) -> None:
        """Initialize delete review use case.

        Args:
            review_service: Review domain service
        """
        self.review_service = review_service

    async def execute(self, request: DeleteReviewRequest) -> DeleteReviewResponse:
        """Execute delete review flow.

        Raises:
            NotFoundError: If the review does not exist
            AuthorizationError: If the caller is not the author or the review
                is already deleted
        """
        review = await self.review_service.delete_own_review(
            request.identity, ReviewId(request.review_id)
        )
        return DeleteReviewResponse(review_id=str(review.id), status=review.status)
