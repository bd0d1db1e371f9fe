"""Repository implementations."""

from feedback.persistence.repository.review import PostgresReviewRepository

__all__ = [
    "PostgresReviewRepository",
]
