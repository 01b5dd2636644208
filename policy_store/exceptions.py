"""Policy store exception hierarchy."""

from __future__ import annotations


class PolicyStoreError(Exception):
    """Base exception for all policy store errors."""


class AdapterInitError(PolicyStoreError):
    """Raised when the adapter cannot open its database."""


class SchemaCreationError(AdapterInitError):
    """Raised when the policy table cannot be created."""


class InvalidFilterError(PolicyStoreError, TypeError):
    """Raised when a filtered load receives something other than a Filter."""


class RuleMismatchError(PolicyStoreError, ValueError):
    """Raised when paired old/new rule lists differ in length."""


class TransactionError(PolicyStoreError):
    """Raised when a transaction cannot be finished cleanly."""


class RollbackError(TransactionError):
    """Raised when rolling back after a failure fails as well.

    Both causes are kept: ``error`` is the failure raised by the unit of work,
    ``rollback_error`` the one raised by the rollback.
    """

    def __init__(self, error: BaseException, rollback_error: BaseException) -> None:
        super().__init__(f"{error}: rolling back transaction: {rollback_error}")
        self.error = error
        self.rollback_error = rollback_error


class CommitError(TransactionError):
    """Raised when committing a transaction fails."""
