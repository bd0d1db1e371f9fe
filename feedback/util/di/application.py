"""Application layer DI providers."""

from dishka import Scope, provide

from feedback.application.usecase.review import (
    ChangeVisibilityUseCase,
    CreateReviewUseCase,
    DeleteReviewUseCase,
    GetRatingSummaryUseCase,
    GetReviewUseCase,
    ListReviewsUseCase,
    ReplyToReviewUseCase,
    UpdateReviewUseCase,
)
from feedback.domain.service import RatingService, ReviewQueryService, ReviewService
from feedback.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Review mutations
    @provide(scope=Scope.REQUEST)
    def get_create_review_use_case(
        self, review_service: ReviewService
    ) -> CreateReviewUseCase:
        """Provide create review use case."""
        return CreateReviewUseCase(review_service=review_service)

    @provide(scope=Scope.REQUEST)
    def get_update_review_use_case(
        self, review_service: ReviewService
    ) -> UpdateReviewUseCase:
        """Provide update review use case."""
        return UpdateReviewUseCase(review_service=review_service)

    @provide(scope=Scope.REQUEST)
    def get_delete_review_use_case(
        self, review_service: ReviewService
    ) -> DeleteReviewUseCase:
        """Provide delete own review use case."""
        return DeleteReviewUseCase(review_service=review_service)

    # Moderation
    @provide(scope=Scope.REQUEST)
    def get_change_visibility_use_case(
        self, review_service: ReviewService
    ) -> ChangeVisibilityUseCase:
        """Provide change visibility use case."""
        return ChangeVisibilityUseCase(review_service=review_service)

    @provide(scope=Scope.REQUEST)
    def get_reply_to_review_use_case(
        self, review_service: ReviewService
    ) -> ReplyToReviewUseCase:
        """Provide reply to review use case."""
        return ReplyToReviewUseCase(review_service=review_service)

    # Reads
    @provide(scope=Scope.REQUEST)
    def get_get_review_use_case(self, review_service: ReviewService) -> GetReviewUseCase:
        """Provide get review use case."""
        return GetReviewUseCase(review_service=review_service)

    @provide(scope=Scope.REQUEST)
    def get_list_reviews_use_case(
        self, review_query_service: ReviewQueryService
    ) -> ListReviewsUseCase:
        """Provide list reviews use case."""
        return ListReviewsUseCase(review_query_service=review_query_service)

    @provide(scope=Scope.REQUEST)
    def get_rating_summary_use_case(
        self, rating_service: RatingService
    ) -> GetRatingSummaryUseCase:
        """Provide rating summary use case."""
        return GetRatingSummaryUseCase(rating_service=rating_service)
