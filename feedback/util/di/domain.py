"""Domain layer DI providers."""

from dishka import Scope, provide

from feedback.config import AuthSettings, ReviewSettings
from feedback.domain.repository import ReviewRepository
from feedback.domain.service import (
    IdentityService,
    JWTService,
    RatingService,
    ReviewPolicy,
    ReviewQueryService,
    ReviewService,
)
from feedback.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_identity_service(
        self, jwt_service: JWTService, auth_settings: AuthSettings
    ) -> IdentityService:
        """Provide identity resolution service."""
        return IdentityService(jwt_service=jwt_service, auth_settings=auth_settings)

    @provide
    def get_review_policy(self) -> ReviewPolicy:
        """Provide review ownership and validation policy."""
        return ReviewPolicy()

    @provide
    def get_review_service(
        self, review_repository: ReviewRepository, review_policy: ReviewPolicy
    ) -> ReviewService:
        """Provide review domain service."""
        return ReviewService(
            review_repository=review_repository, review_policy=review_policy
        )

    @provide
    def get_review_query_service(
        self, review_repository: ReviewRepository, review_settings: ReviewSettings
    ) -> ReviewQueryService:
        """Provide review query service."""
        return ReviewQueryService(
            review_repository=review_repository, review_settings=review_settings
        )

    @provide
    def get_rating_service(self, review_repository: ReviewRepository) -> RatingService:
        """Provide rating aggregation service."""
        return RatingService(review_repository=review_repository)
