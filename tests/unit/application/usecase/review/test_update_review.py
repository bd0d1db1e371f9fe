"""Unit tests for UpdateReviewUseCase and DeleteReviewUseCase."""

import pytest

from feedback.application.usecase.review import (
    CreateReviewRequest,
    CreateReviewUseCase,
    DeleteReviewRequest,
    DeleteReviewUseCase,
    UpdateReviewRequest,
    UpdateReviewUseCase,
)
from feedback.domain.error import AuthorizationError
from feedback.domain.value import DenialReason, ReviewStatus
from tests.conftest import make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


async def _create(unit_env, author):
    create = await unit_env.get(CreateReviewUseCase)
    result = await create.execute(
        CreateReviewRequest(
            identity=author,
            target_key="SKU-1",
            target_name="Widget",
            rating=4,
            title="Good",
            comment="Does what it says",
        )
    )
    return result.review


class TestUpdateReviewUseCase:
    """Tests for UpdateReviewUseCase."""

    @pytest.mark.asyncio
    async def test_only_given_fields_change(self, unit_env):
        # Arrange
        author = make_user()
        review = await _create(unit_env, author)
        update = await unit_env.get(UpdateReviewUseCase)

        # Act
        item = await update.execute(
            UpdateReviewRequest(identity=author, review_id=review.review_id, rating=5)
        )

        # Assert
        assert item.rating == 5
        assert item.title == "Good"
        assert item.updated_at > review.updated_at


class TestDeleteReviewUseCase:
    """Tests for DeleteReviewUseCase."""

    @pytest.mark.asyncio
    async def test_delete_then_edit_is_denied(self, unit_env):
        # Arrange
        author = make_user()
        review = await _create(unit_env, author)
        delete = await unit_env.get(DeleteReviewUseCase)
        update = await unit_env.get(UpdateReviewUseCase)

        # Act
        result = await delete.execute(
            DeleteReviewRequest(identity=author, review_id=review.review_id)
        )

        # Assert
        assert result.status == ReviewStatus.DELETED
        with pytest.raises(AuthorizationError) as exc_info:
            await update.execute(
                UpdateReviewRequest(
                    identity=author, review_id=review.review_id, comment="Second try"
                )
            )
        assert exc_info.value.reason == DenialReason.ALREADY_DELETED
