"""In-memory repository implementations for testing."""

from .review import InMemoryReviewRepository

__all__ = [
    "InMemoryReviewRepository",
]
