"""Change review visibility use case."""

from uuid import UUID

from pydantic import BaseModel

from feedback.domain.model import Identity
from feedback.domain.service import ReviewService
from feedback.domain.value import ReviewId, VisibilityAction

from .common import ReviewItem, to_review_item


class ChangeVisibilityRequest(BaseModel):
    """Change visibility request."""

    identity: Identity  # Must be able to moderate reviews
    review_id: UUID
    action: VisibilityAction


class ChangeVisibilityUseCase:
    """Use case for moderators hiding, unhiding or deleting a review."""

    def __init__(self, review_service: ReviewService) -> None:
        """Initialize change visibility use case.

        Args:
            review_service: Review domain service
        """
        self.review_service = review_service

    async def execute(self, request: ChangeVisibilityRequest) -> ReviewItem:
        """Execute change visibility flow.

        Raises:
            NotFoundError: If the review does not exist
            AuthorizationError: If the caller cannot moderate reviews
            InvalidTransitionError: If the action is not legal from the
                review's current status
        """
        review = await self.review_service.change_visibility(
            request.identity, ReviewId(request.review_id), request.action
        )
        return to_review_item(review)
