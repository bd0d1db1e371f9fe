"""Unit tests for IdentityService."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from feedback.config import AuthSettings
from feedback.domain.service import IdentityService, JWTService
from feedback.domain.value import Capability
from feedback.util.error import ConfigurationError


def _service(settings: AuthSettings | None = None) -> IdentityService:
    settings = settings or AuthSettings(jwt_secret="test-secret")
    return IdentityService(JWTService(auth_settings=settings), settings)


class TestResolve:
    """Tests for IdentityService.resolve."""

    def test_missing_token_is_anonymous(self):
        identity = _service().resolve(None)

        assert identity.is_anonymous
        assert identity.capabilities == frozenset()

    def test_garbage_token_is_anonymous(self):
        assert _service().resolve("not-a-jwt").is_anonymous

    def test_valid_user_token(self):
        # Arrange
        service = _service()
        user_id = str(uuid4())
        token = service.jwt_service.create_token(user_id, "Alice", "user")

        # Act
        identity = service.resolve(token)

        # Assert
        assert str(identity.id) == user_id
        assert identity.display_name == "Alice"
        assert not identity.is_moderator

    @pytest.mark.parametrize("role", ["moderator", "admin", "customer-care", "Admin"])
    def test_moderation_roles_get_capability(self, role):
        service = _service()
        token = service.jwt_service.create_token(str(uuid4()), "Mod", role)

        assert service.resolve(token).can(Capability.MODERATE_REVIEWS)

    def test_unknown_role_gets_no_capabilities(self):
        service = _service()
        token = service.jwt_service.create_token(str(uuid4()), "X", "superhero")

        identity = service.resolve(token)

        assert not identity.is_anonymous
        assert identity.capabilities == frozenset()

    def test_token_signed_with_other_secret_is_anonymous(self):
        other = _service(AuthSettings(jwt_secret="other-secret"))
        token = other.jwt_service.create_token(str(uuid4()), "Eve", "admin")

        assert _service().resolve(token).is_anonymous

    def test_expired_token_is_anonymous(self):
        token = jwt.encode(
            {
                "user_id": str(uuid4()),
                "display_name": "Old",
                "role": "admin",
                "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            "test-secret",
            algorithm="HS256",
        )

        assert _service().resolve(token).is_anonymous

    def test_non_uuid_subject_is_anonymous(self):
        service = _service()
        token = service.jwt_service.create_token("not-a-uuid", "X", "user")

        assert service.resolve(token).is_anonymous


class TestRoleMap:
    """Tests for role capability configuration."""

    def test_unknown_capability_rejected(self):
        settings = AuthSettings(role_capabilities={"user": ["reviews:launch"]})

        with pytest.raises(ConfigurationError):
            _service(settings)

    def test_custom_role_map(self):
        settings = AuthSettings(
            jwt_secret="test-secret",
            role_capabilities={"support": ["reviews:moderate"]},
        )

        service = _service(settings)

        assert service.capabilities_for("support") == {Capability.MODERATE_REVIEWS}
        assert service.capabilities_for("moderator") == frozenset()
