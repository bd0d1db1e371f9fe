"""Review repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from feedback.domain.model.review import Reply, Review
from feedback.domain.value import (
    ReviewId,
    ReviewSortOrder,
    ReviewStatus,
    TargetType,
    UserId,
)
from feedback.domain.value.common import ValueObject


class ReviewCriteria(ValueObject):
    """Filter applied by search and count.

    Every field is optional; None means "do not filter on this".

    Attributes:
        author_id: Only reviews owned by this identity
        target_key: Only reviews of this target
        target_type: Only reviews of this kind of target
        statuses: Allowed statuses (None allows every status)
        search_text: Case-insensitive substring matched against title,
            comment, id, author name, target name or target key
        exact_key: Case-insensitive exact match on target key or review id
    """

    author_id: UserId | None = None
    target_key: str | None = None
    target_type: TargetType | None = None
    statuses: frozenset[ReviewStatus] | None = None
    search_text: str | None = None
    exact_key: str | None = None


class ReviewRepository(ABC):
    """Repository for the Review aggregate.

    Defines the contract for review persistence operations.
    Implementations live in the persistence layer and raise StorageError
    when the backing store fails.
    """

    @abstractmethod
    async def find_by_id(self, review_id: ReviewId) -> Optional[Review]:
        """Find a review by ID.

        Args:
            review_id: The review's unique identifier

        Returns:
            The review (with replies) if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_active_by_author_and_target(
        self,
        author_id: UserId,
        target_type: TargetType,
        target_key: str,
    ) -> Optional[Review]:
        """Find the author's non-deleted review of a target.

        Args:
            author_id: Review owner
            target_type: Kind of target
            target_key: Target identifier

        Returns:
            The review if one exists, None otherwise
        """
        pass

    @abstractmethod
    async def next_sequence_number(self) -> int:
        """Reserve the next display sequence number."""
        pass

    @abstractmethod
    async def add(self, review: Review) -> Review:
        """Insert a new review.

        Args:
            review: Fully validated review

        Returns:
            The stored review

        Raises:
            DuplicateReviewError: If the author already has a non-deleted
                review of the same target
        """
        pass

    @abstractmethod
    async def update_content(
        self,
        review_id: ReviewId,
        rating: int,
        title: str | None,
        comment: str,
        updated_at: datetime,
        target_name: str | None = None,
    ) -> Optional[Review]:
        """Replace the content fields of a review that is not deleted.

        Args:
            review_id: Review to update
            rating: New rating
            title: New title
            comment: New comment
            updated_at: New modification timestamp
            target_name: New target name snapshot (unchanged when None)

        Returns:
            Updated review, or None if it does not exist or is deleted
        """
        pass

    @abstractmethod
    async def transition_status(
        self,
        review_id: ReviewId,
        expected: ReviewStatus,
        new: ReviewStatus,
        updated_at: datetime,
    ) -> Optional[Review]:
        """Atomically move a review from ``expected`` to ``new`` status.

        The write only happens if the stored status still equals
        ``expected`` (compare-and-set).

        Returns:
            Updated review, or None if the review is missing or its status
            no longer matches ``expected``
        """
        pass

    @abstractmethod
    async def append_reply(
        self, review_id: ReviewId, reply: Reply, updated_at: datetime
    ) -> Optional[Review]:
        """Append a reply to a review.

        Existing replies are never modified.

        Returns:
            Updated review, or None if the review does not exist
        """
        pass

    @abstractmethod
    async def search(
        self,
        criteria: ReviewCriteria,
        sort: ReviewSortOrder = ReviewSortOrder.NEWEST,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Review]:
        """Find reviews matching criteria.

        Ordering is deterministic: ties on the sort key are broken by id.

        Args:
            criteria: Filter
            sort: Sort order
            limit: Maximum number of reviews to return
            offset: Number of reviews to skip

        Returns:
            Matching reviews
        """
        pass

    @abstractmethod
    async def count(self, criteria: ReviewCriteria) -> int:
        """Count reviews matching criteria."""
        pass

    @abstractmethod
    async def rating_distribution(
        self,
        target_key: str,
        statuses: frozenset[ReviewStatus],
    ) -> dict[int, int]:
        """Count reviews of a target per star rating.

        Returns:
            Mapping of rating (1-5) to number of reviews; ratings with no
            reviews may be absent
        """
        pass
