"""
Campaign Status Transition Table

Single authority for which status changes are legal. Pure lookups,
no I/O.

    PENDING    -> APPROVED, REJECTED
    APPROVED   -> ACTIVE, CANCELLED
    ACTIVE     -> PROCESSING, CANCELLED
    PROCESSING -> COMPLETED, CANCELLED
    REJECTED, COMPLETED, CANCELLED are terminal
"""

from typing import Dict, FrozenSet

from .models import CampaignStatus
from .protocols import InvalidStatusTransitionError


VALID_TRANSITIONS: Dict[CampaignStatus, FrozenSet[CampaignStatus]] = {
    CampaignStatus.PENDING: frozenset({CampaignStatus.APPROVED, CampaignStatus.REJECTED}),
    CampaignStatus.APPROVED: frozenset({CampaignStatus.ACTIVE, CampaignStatus.CANCELLED}),
    CampaignStatus.ACTIVE: frozenset({CampaignStatus.PROCESSING, CampaignStatus.CANCELLED}),
    CampaignStatus.PROCESSING: frozenset({CampaignStatus.COMPLETED, CampaignStatus.CANCELLED}),
    # Terminal states
    CampaignStatus.REJECTED: frozenset(),
    CampaignStatus.COMPLETED: frozenset(),
    CampaignStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES: FrozenSet[CampaignStatus] = frozenset(
    status for status, allowed in VALID_TRANSITIONS.items() if not allowed
)


def allowed_next(current: CampaignStatus) -> FrozenSet[CampaignStatus]:
    """Statuses reachable from `current` in one step"""
    return VALID_TRANSITIONS.get(current, frozenset())


def is_legal(current: CampaignStatus, next_status: CampaignStatus) -> bool:
    return next_status in allowed_next(current)


def is_terminal(status: CampaignStatus) -> bool:
    return status in TERMINAL_STATUSES


def validate_transition(current: CampaignStatus, next_status: CampaignStatus) -> None:
    """Raise InvalidStatusTransitionError unless current -> next_status is legal"""
    if not is_legal(current, next_status):
        raise InvalidStatusTransitionError(current, next_status)


__all__ = [
    "VALID_TRANSITIONS",
    "TERMINAL_STATUSES",
    "allowed_next",
    "is_legal",
    "is_terminal",
    "validate_transition",
]
