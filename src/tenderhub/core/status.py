"""
Tender lifecycle state machine.

active is the initial state; closed and cancelled are terminal.
"""

from __future__ import annotations

from enum import Enum

from .errors import InvalidTransitionError, ValidationError


class TenderStatus(str, Enum):
    """Tender lifecycle status."""

    ACTIVE = "active"
    CLOSED = "closed"
    CANCELLED = "cancelled"


INITIAL_STATUS = TenderStatus.ACTIVE

TRANSITIONS: dict[TenderStatus, frozenset[TenderStatus]] = {
    TenderStatus.ACTIVE: frozenset({TenderStatus.CLOSED, TenderStatus.CANCELLED}),
    TenderStatus.CLOSED: frozenset(),
    TenderStatus.CANCELLED: frozenset(),
}


def coerce_status(value: str | TenderStatus) -> TenderStatus:
    """Turn a raw status string into a TenderStatus."""
    if isinstance(value, TenderStatus):
        return value
    try:
        return TenderStatus(str(value).strip().lower())
    except ValueError as e:
        raise ValidationError(f"Unknown tender status: {value}", field="status") from e


def is_terminal(status: str | TenderStatus) -> bool:
    return not TRANSITIONS[coerce_status(status)]


def can_transition(current: str | TenderStatus, target: str | TenderStatus) -> bool:
    return coerce_status(target) in TRANSITIONS[coerce_status(current)]


def transition(current: str | TenderStatus, target: str | TenderStatus) -> TenderStatus:
    """Validate a status change and return the new status.

    Raises:
        InvalidTransitionError: target is not reachable from current
    """
    current_status = coerce_status(current)
    target_status = coerce_status(target)
    if target_status not in TRANSITIONS[current_status]:
        raise InvalidTransitionError(current_status.value, target_status.value)
    return target_status
