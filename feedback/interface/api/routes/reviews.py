"""Review routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, Query, Response, status
from pydantic import BaseModel, StrictInt

from feedback.application.usecase.review import (
    ChangeVisibilityRequest,
    ChangeVisibilityUseCase,
    CreateReviewRequest,
    CreateReviewResponse,
    CreateReviewUseCase,
    DeleteReviewRequest,
    DeleteReviewResponse,
    DeleteReviewUseCase,
    GetReviewRequest,
    GetReviewUseCase,
    ListReviewsRequest,
    ListReviewsResponse,
    ListReviewsUseCase,
    ReplyToReviewRequest,
    ReplyToReviewUseCase,
    ReviewItem,
    UpdateReviewRequest,
    UpdateReviewUseCase,
)
from feedback.domain.model import Identity
from feedback.domain.service import IdentityService, ReviewFilter
from feedback.domain.value import (
    ReviewSortOrder,
    ReviewStatus,
    TargetType,
    UserId,
    VisibilityAction,
)

router = APIRouter(prefix="/reviews", tags=["reviews"], route_class=DishkaRoute)


def resolve_identity(
    identity_service: IdentityService,
    authorization: str | None,
    auth_token: str | None,
) -> Identity:
    """Resolve the caller from a bearer header, falling back to the cookie.

    Args:
        identity_service: Identity service from DI
        authorization: Raw Authorization header
        auth_token: JWT token from cookie

    Returns:
        Caller identity (anonymous if no valid token was sent)
    """
    token = auth_token
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            token = credentials.strip()
    return identity_service.resolve(token)


class CreateReviewAPIRequest(BaseModel):
    """API request for submitting a review.

    Field limits are enforced by the domain so that every violation is
    reported together.
    """

    target_type: TargetType = TargetType.PRODUCT
    target_key: str
    target_name: str
    rating: StrictInt
    title: str | None = None
    comment: str


class UpdateReviewAPIRequest(BaseModel):
    """API request for editing a review. Omitted fields are unchanged."""

    rating: StrictInt | None = None
    title: str | None = None
    comment: str | None = None


class VisibilityAPIRequest(BaseModel):
    """API request for a moderation action."""

    action: VisibilityAction


class ReplyAPIRequest(BaseModel):
    """API request for a moderator reply."""

    message: str


@router.post(
    "", response_model=CreateReviewResponse, status_code=status.HTTP_201_CREATED
)
async def create_review(
    request: CreateReviewAPIRequest,
    response: Response,
    create_review_use_case: FromDishka[CreateReviewUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> CreateReviewResponse:
    """Submit a review of a target.

    Requires authentication. If the caller already has a live review of the
    same target it is replaced and 200 is returned instead of 201.
    """
    identity = resolve_identity(identity_service, authorization, auth_token)
    result = await create_review_use_case.execute(
        CreateReviewRequest(
            identity=identity,
            target_type=request.target_type,
            target_key=request.target_key,
            target_name=request.target_name,
            rating=request.rating,
            title=request.title,
            comment=request.comment,
        )
    )
    if not result.created:
        response.status_code = status.HTTP_200_OK
    return result


@router.get("", response_model=ListReviewsResponse)
async def list_reviews(
    list_reviews_use_case: FromDishka[ListReviewsUseCase],
    identity_service: FromDishka[IdentityService],
    q: str | None = Query(default=None, description="Free text, or id:<key>"),
    target_key: str | None = None,
    target_type: TargetType | None = None,
    owner_id: UUID | None = None,
    review_status: ReviewStatus | None = Query(default=None, alias="status"),
    mine: bool = False,
    sort: ReviewSortOrder = ReviewSortOrder.NEWEST,
    page: int = 1,
    page_size: int | None = None,
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> ListReviewsResponse:
    """List reviews with search, filters and pagination.

    Anonymous and regular callers only see public reviews. Authors listing
    their own reviews and moderators may filter by any status.
    """
    identity = resolve_identity(identity_service, authorization, auth_token)
    return await list_reviews_use_case.execute(
        ListReviewsRequest(
            identity=identity,
            review_filter=ReviewFilter(
                owner_id=UserId(owner_id) if owner_id else None,
                target_key=target_key,
                target_type=target_type,
                status=review_status,
                search_text=q,
                mine=mine,
            ),
            sort=sort,
            page=page,
            page_size=page_size,
        )
    )


@router.get("/{review_id}", response_model=ReviewItem)
async def get_review(
    review_id: UUID,
    get_review_use_case: FromDishka[GetReviewUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> ReviewItem:
    """Get a single review with its replies."""
    identity = resolve_identity(identity_service, authorization, auth_token)
    return await get_review_use_case.execute(
        GetReviewRequest(identity=identity, review_id=review_id)
    )


@router.patch("/{review_id}", response_model=ReviewItem)
async def update_review(
    review_id: UUID,
    request: UpdateReviewAPIRequest,
    update_review_use_case: FromDishka[UpdateReviewUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> ReviewItem:
    """Edit a review. Only the author may edit, and not once it is deleted."""
    identity = resolve_identity(identity_service, authorization, auth_token)
    return await update_review_use_case.execute(
        UpdateReviewRequest(
            identity=identity,
            review_id=review_id,
            rating=request.rating,
            title=request.title,
            comment=request.comment,
        )
    )


@router.delete("/{review_id}", response_model=DeleteReviewResponse)
async def delete_review(
    review_id: UUID,
    delete_review_use_case: FromDishka[DeleteReviewUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> DeleteReviewResponse:
    """Soft-delete the caller's own review."""
    identity = resolve_identity(identity_service, authorization, auth_token)
    return await delete_review_use_case.execute(
        DeleteReviewRequest(identity=identity, review_id=review_id)
    )


@router.post("/{review_id}/visibility", response_model=ReviewItem)
async def change_visibility(
    review_id: UUID,
    request: VisibilityAPIRequest,
    change_visibility_use_case: FromDishka[ChangeVisibilityUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> ReviewItem:
    """Hide, unhide or delete a review. Requires the moderation capability."""
    identity = resolve_identity(identity_service, authorization, auth_token)
    return await change_visibility_use_case.execute(
        ChangeVisibilityRequest(
            identity=identity, review_id=review_id, action=request.action
        )
    )


@router.post(
    "/{review_id}/replies",
    response_model=ReviewItem,
    status_code=status.HTTP_201_CREATED,
)
async def reply_to_review(
    review_id: UUID,
    request: ReplyAPIRequest,
    reply_to_review_use_case: FromDishka[ReplyToReviewUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
    auth_token: str | None = Cookie(default=None),
) -> ReviewItem:
    """Append a moderator reply to a review."""
    identity = resolve_identity(identity_service, authorization, auth_token)
    return await reply_to_review_use_case.execute(
        ReplyToReviewRequest(
            identity=identity, review_id=review_id, message=request.message
        )
    )
