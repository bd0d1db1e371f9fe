"""Reply to review use case."""

from uuid import UUID

from pydantic import BaseModel

from feedback.domain.model import Identity
from feedback.domain.service import ReviewService
from feedback.domain.value import ReviewId

from .common import ReviewItem, to_review_item


class ReplyToReviewRequest(BaseModel):
    """Reply to review request."""

    identity: Identity  # Must be able to moderate reviews
    review_id: UUID
    message: str


class ReplyToReviewUseCase:
    """Use case for moderators replying to a review."""

    def __init__(self, review_service: ReviewService) -> None:
        """Initialize reply use case.

        Args:
            review_service: Review domain service
        """
        self.review_service = review_service

    async def execute(self, request: ReplyToReviewRequest) -> ReviewItem:
        """Append the reply and return the updated review.

        Raises:
            NotFoundError: If the review does not exist
            AuthorizationError: If the caller cannot moderate reviews
            ValidationError: If the message is empty
        """
        review = await self.review_service.add_reply(
            request.identity, ReviewId(request.review_id), request.message
        )
        return to_review_item(review)
