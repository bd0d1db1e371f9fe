"""Repository interfaces for the review domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from feedback.domain.repository.review import ReviewCriteria, ReviewRepository

__all__ = [
    "ReviewCriteria",
    "ReviewRepository",
]
