"""Review query and pagination service."""

import math
import re

import logfire
from pydantic import Field

from feedback.config import ReviewSettings
from feedback.domain.error import AuthorizationError, ValidationError
from feedback.domain.model import Identity, Review
from feedback.domain.repository import ReviewCriteria, ReviewRepository
from feedback.domain.value import (
    DenialReason,
    ReviewSortOrder,
    ReviewStatus,
    TargetType,
    UserId,
    Violation,
)
from feedback.domain.value.common import ValueObject

from .base import Service
from .visibility import ALL_STATUSES, PUBLIC_STATUSES

_EXACT_KEY_QUERY = re.compile(r"^id\s*:\s*(.+)$", re.IGNORECASE)


class ReviewFilter(ValueObject):
    """Filter requested by a caller before audience rules are applied."""

    owner_id: UserId | None = None
    target_key: str | None = None
    target_type: TargetType | None = None
    status: ReviewStatus | None = None
    search_text: str | None = None
    mine: bool = False


class ReviewPage(ValueObject):
    """One page of a review listing."""

    items: list[Review]
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total_pages: int = Field(ge=1)
    total_count: int = Field(ge=0)


def total_pages_for(total_count: int, page_size: int) -> int:
    """Number of pages for a result set; at least 1."""
    return max(1, math.ceil(total_count / page_size))


class ReviewQueryService(Service):
    """Serves filtered, sorted, paginated review listings.

    Three audiences are distinguished:
    - anonymous and regular callers only ever see public reviews
    - an owner listing their own reviews sees all of their statuses
    - moderators may request any status, or every status when omitted
    """

    def __init__(
        self, review_repository: ReviewRepository, review_settings: ReviewSettings
    ) -> None:
        """Initialize review query service.

        Args:
            review_repository: Review repository
            review_settings: Page size bounds
        """
        self.review_repository = review_repository
        self.review_settings = review_settings

    def build_criteria(
        self, identity: Identity, review_filter: ReviewFilter
    ) -> ReviewCriteria:
        """Apply audience rules to a requested filter.

        Args:
            identity: Caller identity
            review_filter: Requested filter

        Returns:
            Criteria safe to hand to the repository
        """
        owner_id = review_filter.owner_id
        listing_own = not identity.is_anonymous and (
            review_filter.mine or (owner_id is not None and identity.owns(owner_id))
        )
        if listing_own:
            owner_id = identity.id

        requested = (
            frozenset({review_filter.status}) if review_filter.status else None
        )
        if identity.is_moderator or listing_own:
            statuses = requested or ALL_STATUSES
        else:
            statuses = PUBLIC_STATUSES

        search_text = None
        exact_key = None
        text = (review_filter.search_text or "").strip()
        if text:
            match = _EXACT_KEY_QUERY.match(text)
            if match:
                exact_key = match.group(1).strip()
            else:
                search_text = text

        return ReviewCriteria(
            author_id=owner_id,
            target_key=(review_filter.target_key or "").strip() or None,
            target_type=review_filter.target_type,
            statuses=statuses,
            search_text=search_text,
            exact_key=exact_key,
        )

    def _check_paging(self, page: int, page_size: int | None) -> int:
        size = (
            self.review_settings.default_page_size if page_size is None else page_size
        )
        violations = []
        if page < 1:
            violations.append(Violation(field="page", message="must be at least 1"))
        if size < 1 or size > self.review_settings.max_page_size:
            violations.append(
                Violation(
                    field="page_size",
                    message=f"must be between 1 and {self.review_settings.max_page_size}",
                )
            )
        if violations:
            raise ValidationError(violations)
        return size

    async def list_reviews(
        self,
        identity: Identity,
        review_filter: ReviewFilter,
        page: int = 1,
        page_size: int | None = None,
        sort: ReviewSortOrder = ReviewSortOrder.NEWEST,
    ) -> ReviewPage:
        """List reviews visible to the caller.

        Args:
            identity: Caller identity
            review_filter: Requested filter
            page: 1-indexed page number
            page_size: Items per page (configured default when None)
            sort: Sort order

        Returns:
            Requested page with totals

        Raises:
            AuthorizationError: If an anonymous caller asks for their own reviews
            ValidationError: If page or page size is out of range
        """
        if review_filter.mine and identity.is_anonymous:
            raise AuthorizationError(
                DenialReason.UNAUTHENTICATED, "Sign in to list your own reviews"
            )
        size = self._check_paging(page, page_size)
        criteria = self.build_criteria(identity, review_filter)

        with logfire.span(
            "review_query_service.list_reviews",
            page=page,
            page_size=size,
            sort=sort.value,
            target_key=criteria.target_key,
            statuses=sorted(s.value for s in criteria.statuses or ()),
        ):
            total = await self.review_repository.count(criteria)
            items = await self.review_repository.search(
                criteria,
                sort=sort,
                limit=size,
                offset=(page - 1) * size,
            )
            logfire.info(
                "Reviews listed",
                returned=len(items),
                total_count=total,
            )
            return ReviewPage(
                items=items,
                page=page,
                page_size=size,
                total_pages=total_pages_for(total, size),
                total_count=total,
            )
