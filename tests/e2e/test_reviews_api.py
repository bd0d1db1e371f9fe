"""End-to-end tests for the review HTTP API."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from feedback.interface.api.app import create_app
from tests.conftest import make_moderator, make_token, make_user
from tests.di import build_test_container


@pytest.fixture
def client():
    """Create test client backed by the in-memory store."""
    app_instance = create_app(container=build_test_container())
    with TestClient(app_instance) as test_client:
        yield test_client


def _auth(identity) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(identity)}"}


def _submit(client, identity, **overrides):
    body = {
        "target_type": "Product",
        "target_key": "SKU-1",
        "target_name": "Widget",
        "rating": 4,
        "title": "Good",
        "comment": "Does the job nicely",
    }
    body.update(overrides)
    return client.post("/reviews", json=body, headers=_auth(identity))


class TestCreateReview:
    """POST /reviews."""

    def test_create_returns_201(self, client):
        # Act
        response = _submit(client, make_user("Alice"))

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["created"] is True
        assert data["review"]["status"] == "public"
        assert data["review"]["author_name"] == "Alice"
        assert data["review"]["reply_count"] == 0

    def test_resubmit_returns_200(self, client):
        author = make_user()
        first = _submit(client, author)

        second = _submit(client, author, rating=2)

        assert second.status_code == 200
        assert second.json()["created"] is False
        assert second.json()["review"]["review_id"] == first.json()["review"]["review_id"]

    def test_anonymous_gets_401(self, client):
        response = client.post(
            "/reviews",
            json={
                "target_key": "SKU-1",
                "target_name": "Widget",
                "rating": 4,
                "comment": "Does the job nicely",
            },
        )

        assert response.status_code == 401
        assert response.json()["reason"] == "unauthenticated"

    def test_invalid_token_is_treated_as_anonymous(self, client):
        response = client.post(
            "/reviews",
            json={
                "target_key": "SKU-1",
                "target_name": "Widget",
                "rating": 4,
                "comment": "Does the job nicely",
            },
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401

    def test_validation_errors_listed_together(self, client):
        response = _submit(client, make_user(), rating=9, comment="bad")

        assert response.status_code == 400
        fields = {e["field"] for e in response.json()["errors"]}
        assert fields == {"rating", "comment"}

    def test_malformed_body_is_400(self, client):
        response = _submit(client, make_user(), rating="lots")

        assert response.status_code == 400
        assert response.json()["errors"]

    @pytest.mark.parametrize("rating", [True, 5.0, "3"])
    def test_non_integer_rating_is_400(self, client, rating):
        response = _submit(client, make_user(), rating=rating)

        assert response.status_code == 400
        assert [e["field"] for e in response.json()["errors"]] == ["rating"]
        assert client.get("/reviews").json()["total_count"] == 0

    def test_cookie_token_accepted(self, client):
        author = make_user()
        client.cookies.set("auth_token", make_token(author))

        response = client.post(
            "/reviews",
            json={
                "target_key": "SKU-2",
                "target_name": "Gadget",
                "rating": 5,
                "comment": "Love this gadget",
            },
        )

        assert response.status_code == 201
        assert response.json()["review"]["author_id"] == str(author.id)


class TestReadReviews:
    """GET /reviews and GET /reviews/{id}."""

    def test_hidden_reviews_not_listed_publicly(self, client):
        # Arrange
        author = make_user()
        moderator = make_moderator()
        review_id = _submit(client, author).json()["review"]["review_id"]
        _submit(client, make_user(), target_key="SKU-9")
        client.post(
            f"/reviews/{review_id}/visibility",
            json={"action": "hide"},
            headers=_auth(moderator),
        )

        # Act
        public = client.get("/reviews")
        own = client.get("/reviews", params={"mine": "true"}, headers=_auth(author))
        as_moderator = client.get(
            "/reviews", params={"status": "hidden"}, headers=_auth(moderator)
        )

        # Assert
        assert public.json()["total_count"] == 1
        assert [r["review_id"] for r in own.json()["items"]] == [review_id]
        assert [r["review_id"] for r in as_moderator.json()["items"]] == [review_id]

    def test_pagination_metadata(self, client):
        for n in range(5):
            _submit(client, make_user(), target_key=f"SKU-{n}")

        response = client.get("/reviews", params={"page": 2, "page_size": 2})

        data = response.json()
        assert response.status_code == 200
        assert len(data["items"]) == 2
        assert data["page"] == 2
        assert data["total_pages"] == 3
        assert data["total_count"] == 5

    def test_page_size_over_limit_is_400(self, client):
        response = client.get("/reviews", params={"page_size": 1000})

        assert response.status_code == 400

    def test_page_size_zero_is_400(self, client):
        response = client.get("/reviews", params={"page_size": 0})

        assert response.status_code == 400
        assert [e["field"] for e in response.json()["errors"]] == ["page_size"]

    def test_anonymous_mine_is_401(self, client):
        _submit(client, make_user())

        response = client.get("/reviews", params={"mine": "true"})

        assert response.status_code == 401
        assert response.json()["reason"] == "unauthenticated"

    def test_exact_key_search(self, client):
        _submit(client, make_user(), target_key="SKU-1")
        _submit(client, make_user(), target_key="SKU-10")

        response = client.get("/reviews", params={"q": "id:SKU-1"})

        assert [r["target_key"] for r in response.json()["items"]] == ["SKU-1"]

    def test_get_missing_review_is_404(self, client):
        response = client.get(f"/reviews/{uuid4()}")

        assert response.status_code == 404

    def test_hidden_review_forbidden_to_other_users(self, client):
        review_id = _submit(client, make_user()).json()["review"]["review_id"]
        client.post(
            f"/reviews/{review_id}/visibility",
            json={"action": "hide"},
            headers=_auth(make_moderator()),
        )

        response = client.get(f"/reviews/{review_id}", headers=_auth(make_user("Bob")))

        assert response.status_code == 403


class TestMutations:
    """PATCH, DELETE, visibility and replies."""

    def test_owner_can_edit(self, client):
        author = make_user()
        review_id = _submit(client, author).json()["review"]["review_id"]

        response = client.patch(
            f"/reviews/{review_id}", json={"rating": 5}, headers=_auth(author)
        )

        assert response.status_code == 200
        assert response.json()["rating"] == 5
        assert response.json()["title"] == "Good"

    def test_edit_with_boolean_rating_is_400(self, client):
        author = make_user()
        review_id = _submit(client, author).json()["review"]["review_id"]

        response = client.patch(
            f"/reviews/{review_id}", json={"rating": True}, headers=_auth(author)
        )

        assert response.status_code == 400
        assert client.get(f"/reviews/{review_id}").json()["rating"] == 4

    def test_other_user_cannot_edit(self, client):
        review_id = _submit(client, make_user()).json()["review"]["review_id"]

        response = client.patch(
            f"/reviews/{review_id}",
            json={"rating": 1},
            headers=_auth(make_user("Mallory")),
        )

        assert response.status_code == 403
        assert response.json()["reason"] == "not-owner"

    def test_delete_then_delete_again(self, client):
        author = make_user()
        review_id = _submit(client, author).json()["review"]["review_id"]

        first = client.delete(f"/reviews/{review_id}", headers=_auth(author))
        second = client.delete(f"/reviews/{review_id}", headers=_auth(author))

        assert first.status_code == 200
        assert first.json()["status"] == "deleted"
        assert second.status_code == 403
        assert second.json()["reason"] == "already-deleted"

    def test_hide_twice_is_conflict(self, client):
        moderator = make_moderator()
        review_id = _submit(client, make_user()).json()["review"]["review_id"]
        url = f"/reviews/{review_id}/visibility"

        first = client.post(url, json={"action": "hide"}, headers=_auth(moderator))
        second = client.post(url, json={"action": "hide"}, headers=_auth(moderator))

        assert first.status_code == 200
        assert first.json()["status"] == "hidden"
        assert second.status_code == 409
        assert second.json()["status"] == "hidden"

    def test_regular_user_cannot_moderate(self, client):
        author = make_user()
        review_id = _submit(client, author).json()["review"]["review_id"]

        response = client.post(
            f"/reviews/{review_id}/visibility",
            json={"action": "hide"},
            headers=_auth(author),
        )

        assert response.status_code == 403
        assert response.json()["reason"] == "insufficient-role"

    def test_moderator_reply(self, client):
        review_id = _submit(client, make_user()).json()["review"]["review_id"]

        response = client.post(
            f"/reviews/{review_id}/replies",
            json={"message": "Thanks for letting us know"},
            headers=_auth(make_moderator()),
        )

        assert response.status_code == 201
        assert response.json()["reply_count"] == 1


class TestRatingSummary:
    """GET /targets/{target_key}/rating."""

    def test_average_of_public_reviews(self, client):
        for rating in (4, 5, 3):
            _submit(client, make_user(), rating=rating)

        response = client.get("/targets/SKU-1/rating")

        assert response.status_code == 200
        assert response.json()["average_rating"] == 4.0
        assert response.json()["review_count"] == 3

    def test_unknown_target(self, client):
        response = client.get("/targets/nothing/rating")

        assert response.json()["average_rating"] == 0.0


class TestHealth:
    """GET /health."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
