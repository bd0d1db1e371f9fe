"""Review use cases."""

from .change_visibility import ChangeVisibilityRequest, ChangeVisibilityUseCase
from .common import ReplyItem, ReviewItem, to_review_item
from .create_review import (
    CreateReviewRequest,
    CreateReviewResponse,
    CreateReviewUseCase,
)
from .delete_review import (
    DeleteReviewRequest,
    DeleteReviewResponse,
    DeleteReviewUseCase,
)
from .get_rating_summary import (
    GetRatingSummaryRequest,
    GetRatingSummaryResponse,
    GetRatingSummaryUseCase,
)
from .get_review import GetReviewRequest, GetReviewUseCase
from .list_reviews import ListReviewsRequest, ListReviewsResponse, ListReviewsUseCase
from .reply_to_review import ReplyToReviewRequest, ReplyToReviewUseCase
from .update_review import UpdateReviewRequest, UpdateReviewUseCase

__all__ = [
    "ChangeVisibilityRequest",
    "ChangeVisibilityUseCase",
    "CreateReviewRequest",
    "CreateReviewResponse",
    "CreateReviewUseCase",
    "DeleteReviewRequest",
    "DeleteReviewResponse",
    "DeleteReviewUseCase",
    "GetRatingSummaryRequest",
    "GetRatingSummaryResponse",
    "GetRatingSummaryUseCase",
    "GetReviewRequest",
    "GetReviewUseCase",
    "ListReviewsRequest",
    "ListReviewsResponse",
    "ListReviewsUseCase",
    "ReplyItem",
    "ReplyToReviewRequest",
    "ReplyToReviewUseCase",
    "ReviewItem",
    "UpdateReviewRequest",
    "UpdateReviewUseCase",
    "to_review_item",
]
