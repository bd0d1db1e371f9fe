"""Domain services."""

from .base import Service
from .identity_service import IdentityService
from .jwt_service import JWTService
from .policy import ReviewPolicy, validate_reply_message, validate_review_fields
from .query_service import ReviewFilter, ReviewPage, ReviewQueryService
from .rating_service import RatingService, RatingSummary
from .review_service import ReviewService

__all__ = [
    "IdentityService",
    "JWTService",
    "RatingService",
    "RatingSummary",
    "ReviewFilter",
    "ReviewPage",
    "ReviewPolicy",
    "ReviewQueryService",
    "ReviewService",
    "Service",
    "validate_reply_message",
    "validate_review_fields",
]
