"""Domain model entities for the review subsystem."""

from feedback.domain.model.identity import Identity
from feedback.domain.model.review import Reply, Review

__all__ = [
    "Identity",
    "Reply",
    "Review",
]
