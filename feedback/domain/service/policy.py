"""Ownership and validation policy for reviews.

Pure decision functions: nothing here touches a repository.
"""

from typing import Any

from feedback.domain.model import Identity, Review
from feedback.domain.value import (
    AccessDecision,
    Capability,
    DenialReason,
    MutationAction,
    ReviewStatus,
    Violation,
)

from .base import Service

MIN_RATING = 1
MAX_RATING = 5
MAX_TITLE_LENGTH = 200
MIN_COMMENT_LENGTH = 5
MAX_COMMENT_LENGTH = 3000
MAX_REPLY_LENGTH = 2000


def validate_review_fields(rating: Any, title: str | None, comment: str | None) -> list[Violation]:
    """Check review content and return every violation found.

    Args:
        rating: Star rating, must be an integer in [1, 5]
        title: Optional title, at most 200 characters
        comment: Comment, 5 to 3000 characters after trimming whitespace

    Returns:
        Empty list iff all fields are valid
    """
    violations: list[Violation] = []

    # bool is an int subclass but never a rating
    if not isinstance(rating, int) or isinstance(rating, bool):
        violations.append(Violation(field="rating", message="must be an integer"))
    elif rating < MIN_RATING or rating > MAX_RATING:
        violations.append(
            Violation(
                field="rating",
                message=f"must be between {MIN_RATING} and {MAX_RATING}",
            )
        )

    if title is not None and len(title) > MAX_TITLE_LENGTH:
        violations.append(
            Violation(field="title", message=f"too long (max {MAX_TITLE_LENGTH})")
        )

    trimmed = (comment or "").strip()
    if len(trimmed) < MIN_COMMENT_LENGTH:
        violations.append(
            Violation(
                field="comment",
                message=f"must be at least {MIN_COMMENT_LENGTH} characters",
            )
        )
    elif len(trimmed) > MAX_COMMENT_LENGTH:
        violations.append(
            Violation(field="comment", message=f"too long (max {MAX_COMMENT_LENGTH})")
        )

    return violations


def validate_reply_message(message: str | None) -> list[Violation]:
    """Check a moderator reply message."""
    trimmed = (message or "").strip()
    if not trimmed:
        return [Violation(field="message", message="reply message is required")]
    if len(trimmed) > MAX_REPLY_LENGTH:
        return [
            Violation(field="message", message=f"too long (max {MAX_REPLY_LENGTH})")
        ]
    return []


class ReviewPolicy(Service):
    """Decides who may mutate or read which review."""

    def authorize_mutate(
        self,
        identity: Identity,
        review: Review | None,
        action: MutationAction,
    ) -> AccessDecision:
        """Decide whether an identity may perform an action on a review.

        Rules are evaluated in order:
        1. create: any authenticated identity
        2. edit / delete_own: the author, while the review is not deleted
        3. change_visibility / reply: identities that can moderate reviews
        4. anything else is denied

        Args:
            identity: Caller identity
            review: Review being acted on (None for create or when missing)
            action: Requested action

        Returns:
            Allow, or deny with a machine-readable reason
        """
        if action == MutationAction.CREATE:
            if identity.is_anonymous:
                return AccessDecision.deny(DenialReason.UNAUTHENTICATED)
            return AccessDecision.allow()

        if action in (MutationAction.EDIT, MutationAction.DELETE_OWN):
            if identity.is_anonymous:
                return AccessDecision.deny(DenialReason.UNAUTHENTICATED)
            if review is None:
                return AccessDecision.deny(DenialReason.NOT_FOUND)
            if not identity.owns(review.author_id):
                return AccessDecision.deny(DenialReason.NOT_OWNER)
            if review.status == ReviewStatus.DELETED:
                return AccessDecision.deny(DenialReason.ALREADY_DELETED)
            return AccessDecision.allow()

        if action in (MutationAction.CHANGE_VISIBILITY, MutationAction.REPLY):
            if identity.is_anonymous:
                return AccessDecision.deny(DenialReason.UNAUTHENTICATED)
            if not identity.can(Capability.MODERATE_REVIEWS):
                return AccessDecision.deny(DenialReason.INSUFFICIENT_ROLE)
            if review is None:
                return AccessDecision.deny(DenialReason.NOT_FOUND)
            return AccessDecision.allow()

        return AccessDecision.deny(DenialReason.INSUFFICIENT_ROLE)

    def authorize_read(self, identity: Identity, review: Review) -> AccessDecision:
        """Public reviews are readable by anyone; others by owner or moderator."""
        if review.status == ReviewStatus.PUBLIC:
            return AccessDecision.allow()
        if identity.owns(review.author_id) or identity.is_moderator:
            return AccessDecision.allow()
        if identity.is_anonymous:
            return AccessDecision.deny(DenialReason.UNAUTHENTICATED)
        return AccessDecision.deny(DenialReason.NOT_OWNER)
