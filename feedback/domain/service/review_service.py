"""Review domain service.

Owns every mutation of the review store. Each operation checks policy and
validation first; the repository write is always the last step, so a failed
check never leaves a partial change behind.
"""

from datetime import datetime, timedelta
from uuid import uuid4

import logfire

from feedback.domain.error import (
    AuthorizationError,
    DuplicateReviewError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from feedback.domain.model import Identity, Reply, Review
from feedback.domain.model.review import utcnow
from feedback.domain.repository import ReviewRepository
from feedback.domain.value import (
    DenialReason,
    MutationAction,
    ReviewId,
    ReviewStatus,
    TargetType,
    UserId,
    Violation,
    VisibilityAction,
)

from .base import Service
from .policy import ReviewPolicy, validate_reply_message, validate_review_fields
from .visibility import next_status, self_delete_target

MAX_AUTHOR_NAME_LENGTH = 120
MAX_TARGET_KEY_LENGTH = 120
MAX_TARGET_NAME_LENGTH = 300


def _clean(value: str | None) -> str | None:
    """Trim text; blank becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _advance(previous: datetime) -> datetime:
    """Timestamp strictly later than ``previous``."""
    now = utcnow()
    if now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def _caller_id(identity: Identity) -> UserId:
    if identity.id is None:
        raise AuthorizationError(DenialReason.UNAUTHENTICATED)
    return identity.id


class ReviewService(Service):
    """Domain service for review mutations and single-review reads."""

    def __init__(
        self, review_repository: ReviewRepository, review_policy: ReviewPolicy
    ) -> None:
        """Initialize review service.

        Args:
            review_repository: Review repository
            review_policy: Ownership and validation policy
        """
        self.review_repository = review_repository
        self.review_policy = review_policy

    def _authorize(
        self,
        identity: Identity,
        review: Review | None,
        action: MutationAction,
        review_id: ReviewId | None = None,
    ) -> None:
        decision = self.review_policy.authorize_mutate(identity, review, action)
        if decision.allowed:
            return
        if decision.reason == DenialReason.NOT_FOUND:
            raise NotFoundError("Review", str(review_id))
        logfire.warn(
            "Review mutation denied",
            action=action.value,
            reason=decision.reason.value if decision.reason else None,
            review_id=str(review_id) if review_id else None,
            identity_id=str(identity.id) if identity.id else None,
        )
        raise AuthorizationError(decision.reason or DenialReason.INSUFFICIENT_ROLE)

    def _authorize_existing(
        self,
        identity: Identity,
        review: Review | None,
        action: MutationAction,
        review_id: ReviewId,
    ) -> Review:
        self._authorize(identity, review, action, review_id)
        if review is None:
            raise NotFoundError("Review", str(review_id))
        return review

    async def _require(self, review_id: ReviewId) -> Review:
        review = await self.review_repository.find_by_id(review_id)
        if review is None:
            raise NotFoundError("Review", str(review_id))
        return review

    async def _resubmit(
        self,
        existing: Review,
        rating: int,
        title: str | None,
        comment: str,
        target_name: str,
    ) -> Review | None:
        """Replace the content of an author's live review.

        Returns None if the review was deleted before the write landed.
        """
        updated = await self.review_repository.update_content(
            existing.id,
            rating=rating,
            title=title,
            comment=comment,
            updated_at=_advance(existing.updated_at),
            target_name=target_name,
        )
        if updated is not None:
            logfire.info(
                "Review re-submitted",
                review_id=str(updated.id),
                target_key=updated.target_key,
                rating=rating,
            )
        return updated

    async def create_review(
        self,
        identity: Identity,
        target_type: TargetType,
        target_key: str,
        target_name: str,
        rating: int,
        title: str | None,
        comment: str,
    ) -> tuple[Review, bool]:
        """Create a review, or re-submit the author's existing one.

        An author keeps at most one non-deleted review per target: when one
        exists its content and target name are replaced instead.

        Args:
            identity: Author identity
            target_type: Kind of target
            target_key: Target identifier
            target_name: Target display name at submission time
            rating: Star rating
            title: Optional title
            comment: Comment text

        Returns:
            Tuple of (review, created) where created is False for a re-submit

        Raises:
            AuthorizationError: If the caller is anonymous
            ValidationError: If any field is invalid
            DuplicateReviewError: If a concurrent submission won the insert
                and its review vanished before it could be replaced
        """
        with logfire.span(
            "review_service.create_review",
            target_type=target_type.value,
            target_key=target_key,
            author_id=str(identity.id) if identity.id else None,
        ):
            self._authorize(identity, None, MutationAction.CREATE)
            author_id = _caller_id(identity)

            title = _clean(title)
            comment_text = (comment or "").strip()
            key = (target_key or "").strip()
            name = (target_name or "").strip()

            violations = validate_review_fields(rating, title, comment_text)
            if not key:
                violations.append(Violation(field="target_key", message="is required"))
            elif len(key) > MAX_TARGET_KEY_LENGTH:
                violations.append(
                    Violation(
                        field="target_key",
                        message=f"too long (max {MAX_TARGET_KEY_LENGTH})",
                    )
                )
            if not name:
                violations.append(Violation(field="target_name", message="is required"))
            elif len(name) > MAX_TARGET_NAME_LENGTH:
                violations.append(
                    Violation(
                        field="target_name",
                        message=f"too long (max {MAX_TARGET_NAME_LENGTH})",
                    )
                )
            if violations:
                logfire.info(
                    "Review rejected by validation",
                    violations=[str(v) for v in violations],
                )
                raise ValidationError(violations)

            existing = await self.review_repository.find_active_by_author_and_target(
                author_id, target_type, key
            )
            if existing is not None:
                updated = await self._resubmit(
                    existing, rating, title, comment_text, name
                )
                if updated is not None:
                    return updated, False
                # Deleted between the lookup and the write: create a new one

            now = utcnow()
            review = Review(
                id=ReviewId(uuid4()),
                sequence_number=await self.review_repository.next_sequence_number(),
                author_id=author_id,
                author_name=identity.display_name[:MAX_AUTHOR_NAME_LENGTH],
                target_type=target_type,
                target_key=key,
                target_name=name,
                rating=rating,
                title=title,
                comment=comment_text,
                status=ReviewStatus.PUBLIC,
                replies=(),
                created_at=now,
                updated_at=now,
            )
            try:
                saved = await self.review_repository.add(review)
            except DuplicateReviewError:
                # A concurrent first submission won the insert
                logfire.info(
                    "Concurrent submission detected, re-submitting",
                    target_key=key,
                    author_id=str(author_id),
                )
                existing = (
                    await self.review_repository.find_active_by_author_and_target(
                        author_id, target_type, key
                    )
                )
                if existing is None:
                    raise
                updated = await self._resubmit(
                    existing, rating, title, comment_text, name
                )
                if updated is None:
                    raise
                return updated, False

            logfire.info(
                "Review created",
                review_id=str(saved.id),
                sequence_number=saved.sequence_number,
                target_key=key,
                rating=rating,
            )
            return saved, True

    async def get_review(self, review_id: ReviewId) -> Review:
        """Get a review by ID regardless of who is asking.

        Raises:
            NotFoundError: If no review has this ID
        """
        with logfire.span("review_service.get_review", review_id=str(review_id)):
            return await self._require(review_id)

    async def get_visible_review(
        self, identity: Identity, review_id: ReviewId
    ) -> Review:
        """Get a review the caller is allowed to see.

        Non-public reviews are only visible to their author and moderators.

        Raises:
            NotFoundError: If no review has this ID
            AuthorizationError: If the review is not visible to the caller
        """
        with logfire.span(
            "review_service.get_visible_review", review_id=str(review_id)
        ):
            review = await self._require(review_id)
            decision = self.review_policy.authorize_read(identity, review)
            if not decision.allowed:
                raise AuthorizationError(
                    decision.reason or DenialReason.NOT_OWNER,
                    "Review is not visible",
                )
            return review

    async def update_review(
        self,
        identity: Identity,
        review_id: ReviewId,
        rating: int | None = None,
        title: str | None = None,
        comment: str | None = None,
    ) -> Review:
        """Edit the author's own review.

        Fields left as None keep their current value; an empty title clears
        it. Concurrent author edits are last-write-wins.

        Raises:
            NotFoundError: If no review has this ID
            AuthorizationError: If the caller is not the author or the review
                is deleted
            ValidationError: If the merged fields are invalid
        """
        with logfire.span("review_service.update_review", review_id=str(review_id)):
            found = await self.review_repository.find_by_id(review_id)
            review = self._authorize_existing(
                identity, found, MutationAction.EDIT, review_id
            )

            if rating is None and title is None and comment is None:
                return review

            new_rating = review.rating if rating is None else rating
            new_title = review.title if title is None else _clean(title)
            new_comment = review.comment if comment is None else comment.strip()

            violations = validate_review_fields(new_rating, new_title, new_comment)
            if violations:
                raise ValidationError(violations)

            updated = await self.review_repository.update_content(
                review_id,
                rating=new_rating,
                title=new_title,
                comment=new_comment,
                updated_at=_advance(review.updated_at),
            )
            if updated is None:
                fresh = await self._require(review_id)
                self._authorize(identity, fresh, MutationAction.EDIT, review_id)
                raise AuthorizationError(DenialReason.ALREADY_DELETED)

            logfire.info(
                "Review updated",
                review_id=str(review_id),
                rating=updated.rating,
            )
            return updated

    async def delete_own_review(
        self, identity: Identity, review_id: ReviewId
    ) -> Review:
        """Soft-delete the author's own review.

        Raises:
            NotFoundError: If no review has this ID
            AuthorizationError: If the caller is not the author or the review
                is already deleted
        """
        with logfire.span(
            "review_service.delete_own_review", review_id=str(review_id)
        ):
            found = await self.review_repository.find_by_id(review_id)
            review = self._authorize_existing(
                identity, found, MutationAction.DELETE_OWN, review_id
            )

            target = self_delete_target(review.status)
            updated = await self.review_repository.transition_status(
                review_id,
                expected=review.status,
                new=target,
                updated_at=_advance(review.updated_at),
            )
            if updated is None:
                fresh = await self._require(review_id)
                self._authorize(identity, fresh, MutationAction.DELETE_OWN, review_id)
                raise InvalidTransitionError(fresh.status, VisibilityAction.DELETE)

            logfire.info("Review deleted by author", review_id=str(review_id))
            return updated

    async def change_visibility(
        self,
        identity: Identity,
        review_id: ReviewId,
        action: VisibilityAction,
    ) -> Review:
        """Apply a moderator visibility action.

        The status write is a compare-and-set against the status read here,
        so of two concurrent identical actions at most one succeeds.

        Raises:
            NotFoundError: If no review has this ID
            AuthorizationError: If the caller cannot moderate reviews
            InvalidTransitionError: If the action has no edge from the
                current status
        """
        with logfire.span(
            "review_service.change_visibility",
            review_id=str(review_id),
            action=action.value,
        ):
            found = await self.review_repository.find_by_id(review_id)
            review = self._authorize_existing(
                identity, found, MutationAction.CHANGE_VISIBILITY, review_id
            )

            target = next_status(review.status, action)
            updated = await self.review_repository.transition_status(
                review_id,
                expected=review.status,
                new=target,
                updated_at=_advance(review.updated_at),
            )
            if updated is None:
                fresh = await self._require(review_id)
                logfire.warn(
                    "Concurrent visibility change detected",
                    review_id=str(review_id),
                    action=action.value,
                    status=fresh.status.value,
                )
                raise InvalidTransitionError(fresh.status, action)

            logfire.info(
                "Review visibility changed",
                review_id=str(review_id),
                action=action.value,
                from_status=review.status.value,
                to_status=updated.status.value,
                moderator_id=str(identity.id),
            )
            return updated

    async def add_reply(
        self, identity: Identity, review_id: ReviewId, message: str
    ) -> Review:
        """Append a moderator reply to a review.

        Raises:
            NotFoundError: If no review has this ID
            AuthorizationError: If the caller cannot moderate reviews
            ValidationError: If the message is empty or too long
        """
        with logfire.span("review_service.add_reply", review_id=str(review_id)):
            found = await self.review_repository.find_by_id(review_id)
            review = self._authorize_existing(
                identity, found, MutationAction.REPLY, review_id
            )
            moderator_id = _caller_id(identity)

            violations = validate_reply_message(message)
            if violations:
                raise ValidationError(violations)

            timestamp = _advance(review.updated_at)
            reply = Reply(
                moderator_id=moderator_id,
                message=message.strip(),
                created_at=timestamp,
            )
            updated = await self.review_repository.append_reply(
                review_id, reply, updated_at=timestamp
            )
            if updated is None:
                raise NotFoundError("Review", str(review_id))

            logfire.info(
                "Reply added",
                review_id=str(review_id),
                reply_count=updated.reply_count,
                moderator_id=str(moderator_id),
            )
            return updated
