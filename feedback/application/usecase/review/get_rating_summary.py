"""Get rating summary use case."""

from pydantic import BaseModel

from feedback.domain.service import RatingService


class GetRatingSummaryRequest(BaseModel):
    """Get rating summary request."""

    target_key: str


class GetRatingSummaryResponse(BaseModel):
    """Rating summary for a target."""

    target_key: str
    average_rating: float
    review_count: int
    distribution: dict[int, int]


class GetRatingSummaryUseCase:
    """Use case for the public rating aggregate of a target."""

    def __init__(self, rating_service: RatingService) -> None:
        """Initialize get rating summary use case.

        Args:
            rating_service: Rating aggregation service
        """
        self.rating_service = rating_service

    async def execute(
        self, request: GetRatingSummaryRequest
    ) -> GetRatingSummaryResponse:
        """Summarize public ratings of the target."""
        summary = await self.rating_service.summarize(request.target_key.strip())
        return GetRatingSummaryResponse(
            target_key=summary.target_key,
            average_rating=summary.average_rating,
            review_count=summary.review_count,
            distribution=summary.distribution,
        )
