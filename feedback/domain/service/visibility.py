"""Review visibility state machine.

    PUBLIC --hide--> HIDDEN
    HIDDEN --unhide--> PUBLIC
    PUBLIC | HIDDEN --delete--> DELETED
    DELETED (terminal)

Author self-delete lands in DELETED through ``self_delete_target``; it is a
separate path from the moderator actions but obeys the same terminal rule.
"""

from feedback.domain.error import InvalidTransitionError
from feedback.domain.value import ReviewStatus, VisibilityAction

_TRANSITIONS: dict[tuple[ReviewStatus, VisibilityAction], ReviewStatus] = {
    (ReviewStatus.PUBLIC, VisibilityAction.HIDE): ReviewStatus.HIDDEN,
    (ReviewStatus.HIDDEN, VisibilityAction.UNHIDE): ReviewStatus.PUBLIC,
    (ReviewStatus.PUBLIC, VisibilityAction.DELETE): ReviewStatus.DELETED,
    (ReviewStatus.HIDDEN, VisibilityAction.DELETE): ReviewStatus.DELETED,
}

TERMINAL_STATES = frozenset({ReviewStatus.DELETED})

# Statuses each audience may see when listing
PUBLIC_STATUSES = frozenset({ReviewStatus.PUBLIC})
ALL_STATUSES = frozenset(ReviewStatus)


def next_status(current: ReviewStatus, action: VisibilityAction) -> ReviewStatus:
    """Return the status reached by applying ``action`` to ``current``.

    Raises:
        InvalidTransitionError: If no edge exists for (current, action)
    """
    try:
        return _TRANSITIONS[(current, action)]
    except KeyError:
        raise InvalidTransitionError(current, action) from None


def can_transition(current: ReviewStatus, action: VisibilityAction) -> bool:
    return (current, action) in _TRANSITIONS


def allowed_actions(current: ReviewStatus) -> list[VisibilityAction]:
    """Actions with an edge out of ``current`` (empty for terminal states)."""
    return [action for (status, action) in _TRANSITIONS if status == current]


def self_delete_target(current: ReviewStatus) -> ReviewStatus:
    """Status reached when the author deletes their own review."""
    if current in TERMINAL_STATES:
        raise InvalidTransitionError(current, VisibilityAction.DELETE)
    return ReviewStatus.DELETED
