"""JWT token domain service."""

import logfire

from feedback.config import AuthSettings
from feedback.util.jwt import TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for JWT token operations."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(self, user_id: str, display_name: str, role: str) -> str:
        """Create JWT token for user.

        Args:
            user_id: User ID
            display_name: Display name
            role: Role name

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_token", user_id=user_id, role=role):
            token = create_token(user_id, display_name, role, self.auth_settings)
            logfire.info("JWT token created", user_id=user_id, role=role)
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token and extract payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            payload = verify_token(token, self.auth_settings)
            logfire.info("JWT token verified", user_id=payload.user_id, role=payload.role)
            return payload
