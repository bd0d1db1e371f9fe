"""Get review use case."""

from uuid import UUID

from pydantic import BaseModel

from feedback.domain.model import Identity
from feedback.domain.service import ReviewService
from feedback.domain.value import ReviewId

from .common import ReviewItem, to_review_item


class GetReviewRequest(BaseModel):
    """Get review request."""

    identity: Identity
    review_id: UUID


class GetReviewUseCase:
    """Use case for reading a single review."""

    def __init__(self, review_service: ReviewService) -> None:
        """Initialize get review use case.

        Args:
            review_service: Review domain service
        """
        self.review_service = review_service

    async def execute(self, request: GetReviewRequest) -> ReviewItem:
        """Return the review if the caller may see it.

        Raises:
            NotFoundError: If the review does not exist
            AuthorizationError: If the review is not public and the caller is
                neither its author nor a moderator
        """
        review = await self.review_service.get_visible_review(
            request.identity, ReviewId(request.review_id)
        )
        return to_review_item(review)
