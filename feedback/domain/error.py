"""Domain layer errors.

All of these are recoverable by the caller and are mapped to 4xx/5xx
responses by the interface layer.
"""

from feedback.domain.value.types import DenialReason, ReviewStatus, Violation, VisibilityAction


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """One or more review fields failed validation.

    Carries every violation found, not only the first.
    """

    def __init__(self, violations: list[Violation]):
        self.violations = list(violations)
        super().__init__(
            "Validation failed: " + "; ".join(str(v) for v in self.violations)
        )

    @property
    def messages(self) -> list[str]:
        return [str(v) for v in self.violations]


class AuthorizationError(DomainError):
    """Raised when an identity may not perform a mutation."""

    def __init__(self, reason: DenialReason, detail: str | None = None):
        self.reason = reason
        super().__init__(detail or f"Not authorized: {reason.value}")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvalidTransitionError(DomainError):
    """Raised when a visibility action has no edge from the current status."""

    def __init__(self, status: ReviewStatus, action: VisibilityAction):
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action.value} a review that is {status.value}")


class DuplicateReviewError(DomainError):
    """Raised when an author already has a live review of the target."""

    def __init__(self, author_id: str, target_key: str):
        self.author_id = author_id
        self.target_key = target_key
        super().__init__(
            f"Author {author_id} already has a review of {target_key}"
        )


class StorageError(DomainError):
    """Backing store failed (I/O, connection, constraint).

    Never retried internally; non-idempotent operations such as replies
    could otherwise be applied twice.
    """

    pass
