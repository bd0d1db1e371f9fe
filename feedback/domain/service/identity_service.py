"""Identity resolution domain service."""

from uuid import UUID

import logfire

from feedback.config import AuthSettings
from feedback.domain.model import Identity
from feedback.domain.value import Capability, UserId
from feedback.util.error import ConfigurationError
from feedback.util.jwt import JWTError

from .base import Service
from .jwt_service import JWTService


class IdentityService(Service):
    """Resolves the caller's identity from a verified token.

    Fails closed: anything that cannot be verified becomes the anonymous
    identity, which may only read public reviews.
    """

    def __init__(self, jwt_service: JWTService, auth_settings: AuthSettings) -> None:
        """Initialize identity service.

        Args:
            jwt_service: JWT service for token verification
            auth_settings: Authentication settings holding the role map

        Raises:
            ConfigurationError: If the role map names an unknown capability
        """
        self.jwt_service = jwt_service
        self._role_capabilities = self._load_role_capabilities(
            auth_settings.role_capabilities
        )

    @staticmethod
    def _load_role_capabilities(
        role_map: dict[str, list[str]],
    ) -> dict[str, frozenset[Capability]]:
        resolved: dict[str, frozenset[Capability]] = {}
        for role, tags in role_map.items():
            try:
                resolved[role.lower()] = frozenset(Capability(tag) for tag in tags)
            except ValueError as e:
                raise ConfigurationError(
                    f"Unknown capability for role '{role}': {e}"
                ) from e
        return resolved

    def capabilities_for(self, role: str) -> frozenset[Capability]:
        """Capabilities granted to a role (none for unknown roles)."""
        return self._role_capabilities.get(role.lower(), frozenset())

    def resolve(self, token: str | None) -> Identity:
        """Resolve the identity behind a token.

        Args:
            token: JWT from the Authorization header or auth cookie

        Returns:
            Verified identity, or the anonymous identity
        """
        if not token:
            return Identity.anonymous()

        try:
            payload = self.jwt_service.verify_token(token)
            user_id = UserId(UUID(payload.user_id))
        except (JWTError, ValueError) as e:
            # Invalid or expired token, treat as unauthenticated
            logfire.debug(
                "Token verification failed, treating as anonymous", error=str(e)
            )
            return Identity.anonymous()

        return Identity(
            id=user_id,
            display_name=payload.display_name.strip() or "Guest",
            role=payload.role,
            capabilities=self.capabilities_for(payload.role),
        )
