"""
Error taxonomy for the marketplace core.

Every failure the core reports derives from TenderHubError so adapters
(CLI, HTTP, ...) can catch one base class and branch on the subclass.
"""

from __future__ import annotations


class TenderHubError(Exception):
    """Base class for all marketplace errors."""


class ValidationError(TenderHubError):
    """Malformed or missing input. The caller must correct it; never retried."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class InvalidTransitionError(ValidationError):
    """Requested tender status change is not allowed from the current state."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot change tender status from '{current}' to '{target}'",
            field="status",
        )


class AuthenticationError(TenderHubError):
    """No resolvable identity for an operation that needs an owner."""


class NotFoundError(TenderHubError):
    """Referenced tender or company does not exist."""

    def __init__(self, entity: str, key: object):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class DuplicateApplicationError(TenderHubError):
    """The company already applied to this tender.

    An expected business outcome, not a fault.
    """

    def __init__(self, tender_id: int, company_id: int, application_id: int | None = None):
        self.tender_id = tender_id
        self.company_id = company_id
        self.application_id = application_id
        super().__init__("You have already applied to this tender")


class StoreError(TenderHubError):
    """Underlying persistence failure."""


class UniqueViolation(StoreError):
    """A store-level unique constraint rejected an insert."""

    def __init__(self, message: str, constraint: str | None = None):
        self.constraint = constraint
        super().__init__(message)
