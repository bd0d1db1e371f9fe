"""Domain value objects for the review subsystem.

Value objects are immutable and defined by their values, not identity.
"""

from enum import Enum

from feedback.domain.value.common import ValueObject


class TargetType(str, Enum):
    """Kind of entity a review is written about."""

    PRODUCT = "Product"
    HARDWARE = "Hardware"
    VENDOR = "Vendor"
    TICKET = "Ticket"


class ReviewStatus(str, Enum):
    """Visibility of a review.

    DELETED is terminal: reviews are never physically removed.
    """

    PUBLIC = "public"
    HIDDEN = "hidden"
    DELETED = "deleted"


class VisibilityAction(str, Enum):
    """Moderator action on a review's visibility."""

    HIDE = "hide"
    UNHIDE = "unhide"
    DELETE = "delete"


class MutationAction(str, Enum):
    """Mutating operations checked by the review policy."""

    CREATE = "create"
    EDIT = "edit"
    DELETE_OWN = "delete_own"
    CHANGE_VISIBILITY = "change_visibility"
    REPLY = "reply"


class Capability(str, Enum):
    """Capability tags resolved from an identity's role."""

    MODERATE_REVIEWS = "reviews:moderate"


class DenialReason(str, Enum):
    """Machine-readable reason attached to an authorization denial."""

    UNAUTHENTICATED = "unauthenticated"
    NOT_OWNER = "not-owner"
    ALREADY_DELETED = "already-deleted"
    INSUFFICIENT_ROLE = "insufficient-role"
    NOT_FOUND = "not-found"


class ReviewSortOrder(str, Enum):
    """Sort order for review listings."""

    NEWEST = "newest"  # created_at DESC
    OLDEST = "oldest"  # created_at ASC
    RATING_HIGH = "rating_high"  # rating DESC, then newest
    RATING_LOW = "rating_low"  # rating ASC, then newest


class Violation(ValueObject):
    """A single field-level validation failure."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class AccessDecision(ValueObject):
    """Outcome of an authorization check."""

    allowed: bool
    reason: DenialReason | None = None

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenialReason) -> "AccessDecision":
        return cls(allowed=False, reason=reason)
