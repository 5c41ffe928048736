"""Shared domain error messages and error types."""

from wallit.utils.amount_parser import format_money


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested entity does not exist or belongs to another user."""


class AuthorizationError(DomainError):
    """No current user was supplied to an operation."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class LinkageError(ConflictError):
    """Operation would break transfer or receivable linkage."""


class ExchangeRateUnavailableError(RuntimeError):
    """No exchange rate could be fetched and none is cached.

    This is the only transient error of the ledger: retrying later may
    succeed once the external rate source is reachable again.
    """

    retryable = True


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: str) -> str:
    """Return message for missing category."""
    return f"Category {category_id} not found"


def movement_not_found(movement_id: str) -> str:
    """Return message for missing movement."""
    return f"Movement {movement_id} not found"


def transfer_not_found(transfer_id: str) -> str:
    """Return message for missing transfer."""
    return f"Transfer {transfer_id} not found"


def same_account_transfer() -> str:
    """Return message for a transfer whose legs share an account."""
    return "Source and destination accounts must be different"


def split_sum_mismatch(expected: int, actual: int, currency: str = "CLP") -> str:
    """Return message when split parts do not add up to the original."""
    return f"Split amounts add up to {format_money(actual, currency)}, expected {format_money(expected, currency)}"
