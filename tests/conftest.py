"""Test configuration and fixtures."""

from uuid import uuid4

import logfire

from feedback.config import AuthSettings, Settings
from feedback.domain.model import Identity
from feedback.domain.value import Capability, UserId
from feedback.util.jwt import create_token

# Keep telemetry local during tests
logfire.configure(send_to_logfire=False, console=False)


def make_user(display_name: str = "Alice") -> Identity:
    """Authenticated identity without capabilities."""
    return Identity(id=UserId(uuid4()), display_name=display_name, role="user")


def make_moderator(display_name: str = "Mod") -> Identity:
    """Authenticated identity that can moderate reviews."""
    return Identity(
        id=UserId(uuid4()),
        display_name=display_name,
        role="moderator",
        capabilities=frozenset({Capability.MODERATE_REVIEWS}),
    )


def make_token(identity: Identity, settings: AuthSettings | None = None) -> str:
    """Sign a token for an identity with the configured secret."""
    return create_token(
        str(identity.id),
        identity.display_name,
        identity.role,
        settings or Settings().auth,
    )
