"""Unit tests for ReviewPolicy and field validation."""

from uuid import uuid4

import pytest

from feedback.domain.model import Identity, Review
from feedback.domain.service import (
    ReviewPolicy,
    validate_reply_message,
    validate_review_fields,
)
from feedback.domain.value import (
    DenialReason,
    MutationAction,
    ReviewId,
    ReviewStatus,
)
from tests.conftest import make_moderator, make_user


def _review(author: Identity, status: ReviewStatus = ReviewStatus.PUBLIC) -> Review:
    assert author.id is not None
    return Review(
        id=ReviewId(uuid4()),
        sequence_number=1,
        author_id=author.id,
        author_name=author.display_name,
        target_key="SKU-1",
        target_name="Widget",
        rating=4,
        comment="Works as described",
        status=status,
    )


class TestValidateReviewFields:
    """Tests for validate_review_fields."""

    def test_valid_fields_have_no_violations(self):
        assert validate_review_fields(5, "Great", "Solid product") == []

    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_rating_out_of_range(self, rating):
        violations = validate_review_fields(rating, None, "Solid product")

        assert [v.field for v in violations] == ["rating"]

    @pytest.mark.parametrize("rating", [True, 4.5, "5", None])
    def test_rating_must_be_integer(self, rating):
        violations = validate_review_fields(rating, None, "Solid product")

        assert [v.field for v in violations] == ["rating"]
        assert violations[0].message == "must be an integer"

    def test_comment_is_trimmed_before_length_check(self):
        violations = validate_review_fields(3, None, "   ab   ")

        assert [v.field for v in violations] == ["comment"]

    def test_comment_of_exactly_five_characters_is_accepted(self):
        assert validate_review_fields(3, None, "  abcde ") == []

    def test_title_limit(self):
        assert validate_review_fields(3, "t" * 200, "Solid product") == []
        violations = validate_review_fields(3, "t" * 201, "Solid product")
        assert [v.field for v in violations] == ["title"]

    def test_all_violations_are_reported(self):
        """Every failing field is returned, not only the first."""
        violations = validate_review_fields(9, "t" * 201, "bad")

        assert {v.field for v in violations} == {"rating", "title", "comment"}


class TestValidateReplyMessage:
    """Tests for validate_reply_message."""

    def test_blank_message_rejected(self):
        assert [v.field for v in validate_reply_message("   ")] == ["message"]

    def test_long_message_rejected(self):
        assert validate_reply_message("x" * 2001)

    def test_valid_message(self):
        assert validate_reply_message("Thanks, we are on it") == []


class TestAuthorizeMutate:
    """Tests for ReviewPolicy.authorize_mutate."""

    def test_anonymous_cannot_create(self):
        decision = ReviewPolicy().authorize_mutate(
            Identity.anonymous(), None, MutationAction.CREATE
        )

        assert not decision.allowed
        assert decision.reason == DenialReason.UNAUTHENTICATED

    def test_authenticated_user_can_create(self):
        decision = ReviewPolicy().authorize_mutate(
            make_user(), None, MutationAction.CREATE
        )

        assert decision.allowed

    @pytest.mark.parametrize(
        "action", [MutationAction.EDIT, MutationAction.DELETE_OWN]
    )
    def test_owner_can_edit_and_delete(self, action):
        author = make_user()

        decision = ReviewPolicy().authorize_mutate(author, _review(author), action)

        assert decision.allowed

    @pytest.mark.parametrize(
        "action", [MutationAction.EDIT, MutationAction.DELETE_OWN]
    )
    def test_non_owner_denied(self, action):
        review = _review(make_user())

        decision = ReviewPolicy().authorize_mutate(make_user("Bob"), review, action)

        assert decision.reason == DenialReason.NOT_OWNER

    def test_moderator_cannot_edit_someone_elses_review(self):
        review = _review(make_user())

        decision = ReviewPolicy().authorize_mutate(
            make_moderator(), review, MutationAction.EDIT
        )

        assert decision.reason == DenialReason.NOT_OWNER

    def test_owner_cannot_edit_deleted_review(self):
        author = make_user()
        review = _review(author, ReviewStatus.DELETED)

        decision = ReviewPolicy().authorize_mutate(author, review, MutationAction.EDIT)

        assert decision.reason == DenialReason.ALREADY_DELETED

    def test_owner_can_edit_hidden_review(self):
        author = make_user()
        review = _review(author, ReviewStatus.HIDDEN)

        decision = ReviewPolicy().authorize_mutate(author, review, MutationAction.EDIT)

        assert decision.allowed

    def test_missing_review_is_not_found(self):
        decision = ReviewPolicy().authorize_mutate(
            make_user(), None, MutationAction.EDIT
        )

        assert decision.reason == DenialReason.NOT_FOUND

    @pytest.mark.parametrize(
        "action", [MutationAction.CHANGE_VISIBILITY, MutationAction.REPLY]
    )
    def test_regular_user_cannot_moderate(self, action):
        author = make_user()

        decision = ReviewPolicy().authorize_mutate(author, _review(author), action)

        assert decision.reason == DenialReason.INSUFFICIENT_ROLE

    @pytest.mark.parametrize(
        "action", [MutationAction.CHANGE_VISIBILITY, MutationAction.REPLY]
    )
    def test_moderator_can_moderate(self, action):
        decision = ReviewPolicy().authorize_mutate(
            make_moderator(), _review(make_user()), action
        )

        assert decision.allowed

    def test_anonymous_cannot_moderate(self):
        decision = ReviewPolicy().authorize_mutate(
            Identity.anonymous(),
            _review(make_user()),
            MutationAction.CHANGE_VISIBILITY,
        )

        assert decision.reason == DenialReason.UNAUTHENTICATED


class TestAuthorizeRead:
    """Tests for ReviewPolicy.authorize_read."""

    def test_public_review_readable_by_anyone(self):
        review = _review(make_user())

        assert ReviewPolicy().authorize_read(Identity.anonymous(), review).allowed

    def test_hidden_review_readable_by_owner_and_moderator(self):
        author = make_user()
        review = _review(author, ReviewStatus.HIDDEN)
        policy = ReviewPolicy()

        assert policy.authorize_read(author, review).allowed
        assert policy.authorize_read(make_moderator(), review).allowed
        assert not policy.authorize_read(make_user("Bob"), review).allowed
        assert not policy.authorize_read(Identity.anonymous(), review).allowed
