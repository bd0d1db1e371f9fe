"""List reviews use case."""

import logfire
from pydantic import BaseModel

from feedback.domain.model import Identity
from feedback.domain.service import ReviewFilter, ReviewQueryService
from feedback.domain.value import ReviewSortOrder

from .common import ReviewItem, to_review_item


class ListReviewsRequest(BaseModel):
    """List reviews request."""

    identity: Identity
    review_filter: ReviewFilter = ReviewFilter()
    sort: ReviewSortOrder = ReviewSortOrder.NEWEST
    page: int = 1
    page_size: int | None = None  # Configured default when omitted


class ListReviewsResponse(BaseModel):
    """List reviews response."""

    items: list[ReviewItem]
    page: int
    page_size: int
    total_pages: int
    total_count: int


class ListReviewsUseCase:
    """Use case for listing reviews with search and pagination."""

    def __init__(self, review_query_service: ReviewQueryService) -> None:
        """Initialize list reviews use case.

        Args:
            review_query_service: Review query service
        """
        self.review_query_service = review_query_service

    async def execute(self, request: ListReviewsRequest) -> ListReviewsResponse:
        """Execute list reviews flow.

        Status filtering depends on who is asking; see ReviewQueryService.

        Raises:
            AuthorizationError: If an anonymous caller asks for their own reviews
            ValidationError: If page or page size is out of range
        """
        with logfire.span(
            "list_reviews.execute",
            anonymous=request.identity.is_anonymous,
            mine=request.review_filter.mine,
            page=request.page,
        ):
            result = await self.review_query_service.list_reviews(
                identity=request.identity,
                review_filter=request.review_filter,
                page=request.page,
                page_size=request.page_size,
                sort=request.sort,
            )
            return ListReviewsResponse(
                items=[to_review_item(review) for review in result.items],
                page=result.page,
                page_size=result.page_size,
                total_pages=result.total_pages,
                total_count=result.total_count,
            )
