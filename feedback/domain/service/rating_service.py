"""Rating aggregation service."""

import logfire
from pydantic import Field

from feedback.domain.model import Review
from feedback.domain.repository import ReviewRepository
from feedback.domain.value.common import ValueObject

from .base import Service
from .visibility import PUBLIC_STATUSES


class RatingSummary(ValueObject):
    """Aggregate of public ratings for one target."""

    target_key: str
    average_rating: float = Field(ge=0, le=5)
    review_count: int = Field(ge=0)
    distribution: dict[int, int]  # stars (1-5) -> number of reviews


def average_of(distribution: dict[int, int]) -> float:
    """Mean rating rounded to one decimal; 0.0 when there are no ratings."""
    count = sum(distribution.values())
    if count == 0:
        return 0.0
    total = sum(stars * n for stars, n in distribution.items())
    return round(total / count, 1)


class RatingService(Service):
    """Computes rating aggregates over public reviews only."""

    def __init__(self, review_repository: ReviewRepository) -> None:
        """Initialize rating service.

        Args:
            review_repository: Review repository
        """
        self.review_repository = review_repository

    async def summarize(self, target_key: str) -> RatingSummary:
        """Average, count and per-star distribution for a target."""
        with logfire.span("rating_service.summarize", target_key=target_key):
            counts = await self.review_repository.rating_distribution(
                target_key, PUBLIC_STATUSES
            )
            distribution = {stars: counts.get(stars, 0) for stars in range(1, 6)}
            return RatingSummary(
                target_key=target_key,
                average_rating=average_of(distribution),
                review_count=sum(distribution.values()),
                distribution=distribution,
            )

    async def average_rating(self, target_key: str) -> float:
        """Average public rating of a target, rounded to one decimal."""
        summary = await self.summarize(target_key)
        return summary.average_rating

    @staticmethod
    def reply_count(review: Review) -> int:
        return len(review.replies)
