"""In-memory review repository for testing."""

import asyncio
import itertools
from datetime import datetime
from typing import Optional

from feedback.domain.error import DuplicateReviewError
from feedback.domain.model.review import Reply, Review
from feedback.domain.repository.review import ReviewCriteria, ReviewRepository
from feedback.domain.value import (
    ReviewId,
    ReviewSortOrder,
    ReviewStatus,
    TargetType,
    UserId,
)


def _matches(review: Review, criteria: ReviewCriteria) -> bool:
    if criteria.author_id is not None and review.author_id != criteria.author_id:
        return False
    if criteria.target_key is not None and review.target_key != criteria.target_key:
        return False
    if criteria.target_type is not None and review.target_type != criteria.target_type:
        return False
    if criteria.statuses is not None and review.status not in criteria.statuses:
        return False
    if criteria.exact_key is not None:
        key = criteria.exact_key.lower()
        if review.target_key.lower() != key and str(review.id).lower() != key:
            return False
    if criteria.search_text is not None:
        needle = criteria.search_text.lower()
        haystack = (
            review.title or "",
            review.comment,
            str(review.id),
            review.author_name,
            review.target_name,
            review.target_key,
        )
        if not any(needle in field.lower() for field in haystack):
            return False
    return True


def _sort_key(sort: ReviewSortOrder):
    # Newest-first orderings negate the timestamp; id always breaks ties
    if sort == ReviewSortOrder.OLDEST:
        return lambda r: (r.created_at.timestamp(), str(r.id))
    if sort == ReviewSortOrder.RATING_HIGH:
        return lambda r: (-r.rating, -r.created_at.timestamp(), str(r.id))
    if sort == ReviewSortOrder.RATING_LOW:
        return lambda r: (r.rating, -r.created_at.timestamp(), str(r.id))
    return lambda r: (-r.created_at.timestamp(), str(r.id))


class InMemoryReviewRepository(ReviewRepository):
    """In-memory implementation of ReviewRepository for testing.

    Mutations run under a single lock so conditional writes behave like
    the PostgreSQL compare-and-set statements.
    """

    def __init__(self) -> None:
        self._reviews: dict[ReviewId, Review] = {}
        self._sequence = itertools.count(1)
        self._lock = asyncio.Lock()

    async def find_by_id(self, review_id: ReviewId) -> Optional[Review]:
        """Find a review by ID."""
        return self._reviews.get(review_id)

    async def find_active_by_author_and_target(
        self,
        author_id: UserId,
        target_type: TargetType,
        target_key: str,
    ) -> Optional[Review]:
        """Find the author's non-deleted review of a target."""
        matches = [
            r
            for r in self._reviews.values()
            if r.author_id == author_id
            and r.target_type == target_type
            and r.target_key == target_key
            and r.status != ReviewStatus.DELETED
        ]
        if not matches:
            return None
        return max(matches, key=lambda r: r.created_at)

    async def next_sequence_number(self) -> int:
        """Reserve the next sequence number."""
        return next(self._sequence)

    async def add(self, review: Review) -> Review:
        """Insert a review, keeping one live review per author and target."""
        async with self._lock:
            if review.status != ReviewStatus.DELETED and any(
                r.author_id == review.author_id
                and r.target_type == review.target_type
                and r.target_key == review.target_key
                and r.status != ReviewStatus.DELETED
                for r in self._reviews.values()
            ):
                raise DuplicateReviewError(str(review.author_id), review.target_key)
            self._reviews[review.id] = review
            return review

    async def update_content(
        self,
        review_id: ReviewId,
        rating: int,
        title: str | None,
        comment: str,
        updated_at: datetime,
        target_name: str | None = None,
    ) -> Optional[Review]:
        """Replace content if the review exists and is not deleted."""
        async with self._lock:
            review = self._reviews.get(review_id)
            if review is None or review.status == ReviewStatus.DELETED:
                return None
            changes = {
                "rating": rating,
                "title": title,
                "comment": comment,
                "updated_at": updated_at,
            }
            if target_name is not None:
                changes["target_name"] = target_name
            updated = review.model_copy(update=changes)
            self._reviews[review_id] = updated
            return updated

    async def transition_status(
        self,
        review_id: ReviewId,
        expected: ReviewStatus,
        new: ReviewStatus,
        updated_at: datetime,
    ) -> Optional[Review]:
        """Compare-and-set the status."""
        async with self._lock:
            review = self._reviews.get(review_id)
            if review is None or review.status != expected:
                return None
            updated = review.model_copy(update={"status": new, "updated_at": updated_at})
            self._reviews[review_id] = updated
            return updated

    async def append_reply(
        self, review_id: ReviewId, reply: Reply, updated_at: datetime
    ) -> Optional[Review]:
        """Append a reply."""
        async with self._lock:
            review = self._reviews.get(review_id)
            if review is None:
                return None
            updated = review.model_copy(
                update={"replies": review.replies + (reply,), "updated_at": updated_at}
            )
            self._reviews[review_id] = updated
            return updated

    async def search(
        self,
        criteria: ReviewCriteria,
        sort: ReviewSortOrder = ReviewSortOrder.NEWEST,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Review]:
        """Find reviews matching criteria."""
        reviews = [r for r in self._reviews.values() if _matches(r, criteria)]
        reviews.sort(key=_sort_key(sort))
        return reviews[offset : offset + limit]

    async def count(self, criteria: ReviewCriteria) -> int:
        """Count reviews matching criteria."""
        return sum(1 for r in self._reviews.values() if _matches(r, criteria))

    async def rating_distribution(
        self,
        target_key: str,
        statuses: frozenset[ReviewStatus],
    ) -> dict[int, int]:
        """Count reviews of a target per rating."""
        counts: dict[int, int] = {}
        for review in self._reviews.values():
            if review.target_key == target_key and review.status in statuses:
                counts[review.rating] = counts.get(review.rating, 0) + 1
        return counts
