"""Domain value objects for the review subsystem."""

from feedback.domain.value.identifiers import ReviewId, UserId
from feedback.domain.value.types import (
    AccessDecision,
    Capability,
    DenialReason,
    MutationAction,
    ReviewSortOrder,
    ReviewStatus,
    TargetType,
    Violation,
    VisibilityAction,
)

__all__ = [
    # Identifiers
    "ReviewId",
    "UserId",
    # Types
    "AccessDecision",
    "Capability",
    "DenialReason",
    "MutationAction",
    "ReviewSortOrder",
    "ReviewStatus",
    "TargetType",
    "Violation",
    "VisibilityAction",
]
