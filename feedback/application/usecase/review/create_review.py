"""Create review use case."""

from pydantic import BaseModel

from feedback.domain.model import Identity
from feedback.domain.service import ReviewService
from feedback.domain.value import TargetType

from .common import ReviewItem, to_review_item


class CreateReviewRequest(BaseModel):
    """Create review request."""

    identity: Identity  # Resolved from the caller's token
    target_type: TargetType = TargetType.PRODUCT
    target_key: str
    target_name: str
    rating: int
    title: str | None = None
    comment: str


class CreateReviewResponse(BaseModel):
    """Create review response."""

    review: ReviewItem
    created: bool  # False when the author's existing review was replaced


class CreateReviewUseCase:
    """Use case for submitting a review of a target."""

    def __init__(self, review_service: ReviewService) -> None:
        """Initialize create review use case.

        Args:
            review_service: Review domain service
        """
        self.review_service = review_service

    async def execute(self, request: CreateReviewRequest) -> CreateReviewResponse:
        """Execute create review flow.

        Args:
            request: Create review request

        Returns:
            The stored review and whether it was newly created

        Raises:
            AuthorizationError: If the caller is anonymous
            ValidationError: If any field is invalid
        """
        review, created = await self.review_service.create_review(
            identity=request.identity,
            target_type=request.target_type,
            target_key=request.target_key,
            target_name=request.target_name,
            rating=request.rating,
            title=request.title,
            comment=request.comment,
        )
        return CreateReviewResponse(review=to_review_item(review), created=created)
