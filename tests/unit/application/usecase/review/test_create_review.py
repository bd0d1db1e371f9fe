"""Unit tests for CreateReviewUseCase."""

import pytest

from feedback.application.usecase.review import (
    CreateReviewRequest,
    CreateReviewUseCase,
)
from feedback.domain.error import AuthorizationError
from feedback.domain.model import Identity
from feedback.domain.value import ReviewStatus, TargetType
from tests.conftest import make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestCreateReviewUseCase:
    """Tests for CreateReviewUseCase."""

    @pytest.mark.asyncio
    async def test_create_returns_review_item(self, unit_env):
        # Arrange
        use_case = await unit_env.get(CreateReviewUseCase)
        author = make_user("Dana")

        # Act
        result = await use_case.execute(
            CreateReviewRequest(
                identity=author,
                target_type=TargetType.HARDWARE,
                target_key="  HW-42 ",
                target_name="Router",
                rating=3,
                title="  ",
                comment="  Average at best  ",
            )
        )

        # Assert
        assert result.created
        assert result.review.author_id == str(author.id)
        assert result.review.author_name == "Dana"
        assert result.review.target_key == "HW-42"
        assert result.review.title is None
        assert result.review.comment == "Average at best"
        assert result.review.status == ReviewStatus.PUBLIC
        assert result.review.reply_count == 0

    @pytest.mark.asyncio
    async def test_second_submission_reports_not_created(self, unit_env):
        use_case = await unit_env.get(CreateReviewUseCase)
        author = make_user()
        request = CreateReviewRequest(
            identity=author,
            target_key="SKU-1",
            target_name="Widget",
            rating=4,
            comment="Pretty good",
        )

        first = await use_case.execute(request)
        second = await use_case.execute(request)

        assert first.created and not second.created
        assert first.review.review_id == second.review.review_id

    @pytest.mark.asyncio
    async def test_anonymous_rejected(self, unit_env):
        use_case = await unit_env.get(CreateReviewUseCase)

        with pytest.raises(AuthorizationError):
            await use_case.execute(
                CreateReviewRequest(
                    identity=Identity.anonymous(),
                    target_key="SKU-1",
                    target_name="Widget",
                    rating=4,
                    comment="Pretty good",
                )
            )
