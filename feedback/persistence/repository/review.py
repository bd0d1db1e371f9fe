"""PostgreSQL implementation of Review repository."""

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator, Optional, Sequence

import logfire
from sqlalchemy import String, and_, asc, cast, desc, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feedback.domain.error import DuplicateReviewError, StorageError
from feedback.domain.model import Reply, Review
from feedback.domain.repository import ReviewCriteria, ReviewRepository
from feedback.domain.value import (
    ReviewId,
    ReviewSortOrder,
    ReviewStatus,
    TargetType,
    UserId,
)
from feedback.persistence.mappers import (
    reply_to_dict,
    review_to_dict,
    row_to_reply,
    row_to_review,
)
from feedback.persistence.tables import (
    ACTIVE_REVIEW_INDEX,
    review_replies_table,
    review_sequence,
    reviews_table,
)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Translate SQLAlchemy failures into StorageError."""
    try:
        yield
    except SQLAlchemyError as e:
        logfire.error("Review storage failure", operation=operation, error=str(e))
        raise StorageError(f"Review storage failed during {operation}") from e


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _where(criteria: ReviewCriteria) -> list[Any]:
    """Build WHERE clauses for criteria."""
    t = reviews_table.c
    clauses: list[Any] = []
    if criteria.author_id is not None:
        clauses.append(t.author_id == criteria.author_id)
    if criteria.target_key is not None:
        clauses.append(t.target_key == criteria.target_key)
    if criteria.target_type is not None:
        clauses.append(t.target_type == criteria.target_type.value)
    if criteria.statuses is not None:
        clauses.append(t.status.in_([s.value for s in criteria.statuses]))
    if criteria.exact_key is not None:
        key = criteria.exact_key.lower()
        clauses.append(
            or_(func.lower(t.target_key) == key, cast(t.id, String) == key)
        )
    if criteria.search_text is not None:
        pattern = f"%{_escape_like(criteria.search_text)}%"
        clauses.append(
            or_(
                t.title.ilike(pattern, escape="\\"),
                t.comment.ilike(pattern, escape="\\"),
                cast(t.id, String).ilike(pattern, escape="\\"),
                t.author_name.ilike(pattern, escape="\\"),
                t.target_name.ilike(pattern, escape="\\"),
                t.target_key.ilike(pattern, escape="\\"),
            )
        )
    return clauses


def _order_by(sort: ReviewSortOrder) -> list[Any]:
    t = reviews_table.c
    if sort == ReviewSortOrder.OLDEST:
        return [asc(t.created_at), asc(t.id)]
    if sort == ReviewSortOrder.RATING_HIGH:
        return [desc(t.rating), desc(t.created_at), asc(t.id)]
    if sort == ReviewSortOrder.RATING_LOW:
        return [asc(t.rating), desc(t.created_at), asc(t.id)]
    return [desc(t.created_at), asc(t.id)]


class PostgresReviewRepository(ReviewRepository):
    """PostgreSQL implementation of ReviewRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _replies_for(
        self, review_ids: Sequence[ReviewId]
    ) -> dict[ReviewId, list[Reply]]:
        """Load replies for several reviews in one query."""
        if not review_ids:
            return {}
        stmt = (
            select(review_replies_table)
            .where(review_replies_table.c.review_id.in_(review_ids))
            .order_by(review_replies_table.c.review_id, review_replies_table.c.position)
        )
        result = await self.session.execute(stmt)
        replies: dict[ReviewId, list[Reply]] = {}
        for row in result.fetchall():
            data = row._asdict()
            replies.setdefault(data["review_id"], []).append(row_to_reply(data))
        return replies

    async def _hydrate(self, rows: Sequence[Any]) -> list[Review]:
        """Turn review rows into Review models with their replies."""
        dicts = [row._asdict() for row in rows]
        replies = await self._replies_for([d["id"] for d in dicts])
        return [row_to_review(d, replies.get(d["id"], [])) for d in dicts]

    async def find_by_id(self, review_id: ReviewId) -> Optional[Review]:
        """Find a review by ID."""
        with _storage_errors("find_by_id"):
            stmt = select(reviews_table).where(reviews_table.c.id == review_id)
            result = await self.session.execute(stmt)
            row = result.fetchone()
            if row is None:
                return None
            return (await self._hydrate([row]))[0]

    async def find_active_by_author_and_target(
        self,
        author_id: UserId,
        target_type: TargetType,
        target_key: str,
    ) -> Optional[Review]:
        """Find the author's non-deleted review of a target."""
        with _storage_errors("find_active_by_author_and_target"):
            stmt = (
                select(reviews_table)
                .where(
                    and_(
                        reviews_table.c.author_id == author_id,
                        reviews_table.c.target_type == target_type.value,
                        reviews_table.c.target_key == target_key,
                        reviews_table.c.status != ReviewStatus.DELETED.value,
                    )
                )
                .order_by(desc(reviews_table.c.created_at))
                .limit(1)
            )
            result = await self.session.execute(stmt)
            row = result.fetchone()
            if row is None:
                return None
            return (await self._hydrate([row]))[0]

    async def next_sequence_number(self) -> int:
        """Reserve the next value of the review sequence."""
        with _storage_errors("next_sequence_number"):
            value = await self.session.scalar(select(review_sequence.next_value()))
            return int(value)

    async def add(self, review: Review) -> Review:
        """Insert a review (replies are inserted separately)."""
        with _storage_errors("add"):
            try:
                async with self.session.begin_nested():
                    await self.session.execute(
                        reviews_table.insert().values(**review_to_dict(review))
                    )
                    for position, reply in enumerate(review.replies):
                        await self.session.execute(
                            review_replies_table.insert().values(
                                **reply_to_dict(review.id, position, reply)
                            )
                        )
            except IntegrityError as e:
                if ACTIVE_REVIEW_INDEX not in str(e.orig):
                    raise
                raise DuplicateReviewError(
                    str(review.author_id), review.target_key
                ) from e
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
        """Replace content of a review that is not deleted."""
        values: dict[str, Any] = {
            "rating": rating,
            "title": title,
            "comment": comment,
            "updated_at": updated_at,
        }
        if target_name is not None:
            values["target_name"] = target_name

        with _storage_errors("update_content"):
            stmt = (
                update(reviews_table)
                .where(reviews_table.c.id == review_id)
                .where(reviews_table.c.status != ReviewStatus.DELETED.value)
                .values(**values)
                .returning(reviews_table)
            )
            result = await self.session.execute(stmt)
            row = result.fetchone()
            if row is None:
                # Review not found or deleted
                return None
            await self.session.flush()
            return (await self._hydrate([row]))[0]

    async def transition_status(
        self,
        review_id: ReviewId,
        expected: ReviewStatus,
        new: ReviewStatus,
        updated_at: datetime,
    ) -> Optional[Review]:
        """Compare-and-set the status in a single UPDATE statement."""
        with _storage_errors("transition_status"):
            stmt = (
                update(reviews_table)
                .where(reviews_table.c.id == review_id)
                .where(reviews_table.c.status == expected.value)
                .values(status=new.value, updated_at=updated_at)
                .returning(reviews_table)
            )
            result = await self.session.execute(stmt)
            row = result.fetchone()
            if row is None:
                return None
            await self.session.flush()
            return (await self._hydrate([row]))[0]

    async def append_reply(
        self, review_id: ReviewId, reply: Reply, updated_at: datetime
    ) -> Optional[Review]:
        """Append a reply while holding the parent row lock."""
        with _storage_errors("append_reply"):
            locked = await self.session.execute(
                select(reviews_table.c.id)
                .where(reviews_table.c.id == review_id)
                .with_for_update()
            )
            if locked.fetchone() is None:
                return None

            position = await self.session.scalar(
                select(func.count())
                .select_from(review_replies_table)
                .where(review_replies_table.c.review_id == review_id)
            )
            await self.session.execute(
                review_replies_table.insert().values(
                    **reply_to_dict(review_id, int(position or 0), reply)
                )
            )
            result = await self.session.execute(
                update(reviews_table)
                .where(reviews_table.c.id == review_id)
                .values(updated_at=updated_at)
                .returning(reviews_table)
            )
            row = result.fetchone()
            await self.session.flush()
            return (await self._hydrate([row]))[0] if row else None

    async def search(
        self,
        criteria: ReviewCriteria,
        sort: ReviewSortOrder = ReviewSortOrder.NEWEST,
        limit: int = 10,
        offset: int = 0,
    ) -> list[Review]:
        """Find reviews matching criteria."""
        with _storage_errors("search"):
            stmt = (
                select(reviews_table)
                .where(*_where(criteria))
                .order_by(*_order_by(sort))
                .limit(limit)
                .offset(offset)
            )
            result = await self.session.execute(stmt)
            return await self._hydrate(result.fetchall())

    async def count(self, criteria: ReviewCriteria) -> int:
        """Count reviews matching criteria."""
        with _storage_errors("count"):
            stmt = (
                select(func.count())
                .select_from(reviews_table)
                .where(*_where(criteria))
            )
            result = await self.session.execute(stmt)
            return result.scalar() or 0

    async def rating_distribution(
        self,
        target_key: str,
        statuses: frozenset[ReviewStatus],
    ) -> dict[int, int]:
        """Count reviews of a target per rating."""
        with _storage_errors("rating_distribution"):
            stmt = (
                select(reviews_table.c.rating, func.count())
                .where(reviews_table.c.target_key == target_key)
                .where(reviews_table.c.status.in_([s.value for s in statuses]))
                .group_by(reviews_table.c.rating)
            )
            result = await self.session.execute(stmt)
            return {int(rating): int(n) for rating, n in result.fetchall()}
