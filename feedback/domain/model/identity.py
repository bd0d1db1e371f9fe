"""Caller identity.

Resolved server-side from a verified token. Anonymous callers have no id
and no capabilities.
"""

from pydantic import Field

from feedback.domain.model.common import DomainModel
from feedback.domain.value import Capability, UserId

ANONYMOUS_ROLE = "anonymous"


class Identity(DomainModel):
    """Who is making a request and what they may do."""

    id: UserId | None = None
    display_name: str = "Guest"
    role: str = ANONYMOUS_ROLE
    capabilities: frozenset[Capability] = Field(default_factory=frozenset)

    @classmethod
    def anonymous(cls) -> "Identity":
        return cls()

    @property
    def is_anonymous(self) -> bool:
        return self.id is None

    def can(self, capability: Capability) -> bool:
        return capability in self.capabilities

    @property
    def is_moderator(self) -> bool:
        return self.can(Capability.MODERATE_REVIEWS)

    def owns(self, author_id: UserId) -> bool:
        return not self.is_anonymous and self.id == author_id
