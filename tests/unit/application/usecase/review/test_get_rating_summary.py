"""Unit tests for GetRatingSummaryUseCase."""

import pytest

from feedback.application.usecase.review import (
    CreateReviewRequest,
    CreateReviewUseCase,
    GetRatingSummaryRequest,
    GetRatingSummaryUseCase,
)
from tests.conftest import make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestGetRatingSummaryUseCase:
    """Tests for GetRatingSummaryUseCase."""

    @pytest.mark.asyncio
    async def test_summary_for_target(self, unit_env):
        # Arrange
        create = await unit_env.get(CreateReviewUseCase)
        summarize = await unit_env.get(GetRatingSummaryUseCase)
        for rating in (4, 5, 3):
            await create.execute(
                CreateReviewRequest(
                    identity=make_user(),
                    target_key="VND-7",
                    target_name="Acme Corp",
                    rating=rating,
                    comment="Vendor experience",
                )
            )

        # Act
        summary = await summarize.execute(GetRatingSummaryRequest(target_key="VND-7"))

        # Assert
        assert summary.target_key == "VND-7"
        assert summary.average_rating == 4.0
        assert summary.review_count == 3
        assert summary.distribution[5] == 1
