"""Review target routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter

from feedback.application.usecase.review import (
    GetRatingSummaryRequest,
    GetRatingSummaryResponse,
    GetRatingSummaryUseCase,
)

router = APIRouter(prefix="/targets", tags=["targets"], route_class=DishkaRoute)


@router.get("/{target_key}/rating", response_model=GetRatingSummaryResponse)
async def get_rating_summary(
    target_key: str,
    get_rating_summary_use_case: FromDishka[GetRatingSummaryUseCase],
) -> GetRatingSummaryResponse:
    """Average rating, count and star distribution over public reviews.

    Targets nobody has reviewed yet report an average of 0.0.
    """
    return await get_rating_summary_use_case.execute(
        GetRatingSummaryRequest(target_key=target_key)
    )
