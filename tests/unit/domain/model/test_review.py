"""Unit tests for the Review model."""

from uuid import uuid4

import pytest
from pydantic import ValidationError as PydanticValidationError

from feedback.domain.model import Identity, Reply, Review
from feedback.domain.value import ReviewId, ReviewStatus, UserId


def _review(**overrides) -> Review:
    values = {
        "id": ReviewId(uuid4()),
        "sequence_number": 1,
        "author_id": UserId(uuid4()),
        "target_key": "SKU-1",
        "rating": 3,
        "comment": "It is fine",
    }
    values.update(overrides)
    return Review(**values)


class TestReview:
    """Tests for Review."""

    def test_defaults(self):
        review = _review()

        assert review.status == ReviewStatus.PUBLIC
        assert review.reply_count == 0
        assert not review.is_deleted

    def test_reply_count_follows_replies(self):
        reply = Reply(moderator_id=UserId(uuid4()), message="Thanks")

        assert _review(replies=(reply, reply)).reply_count == 2

    def test_rating_bounds_enforced(self):
        with pytest.raises(PydanticValidationError):
            _review(rating=6)

    def test_immutable(self):
        review = _review()

        with pytest.raises(PydanticValidationError):
            review.rating = 5


class TestIdentity:
    """Tests for Identity."""

    def test_anonymous_owns_nothing(self):
        assert not Identity.anonymous().owns(UserId(uuid4()))

    def test_owner(self):
        user_id = UserId(uuid4())

        assert Identity(id=user_id).owns(user_id)
