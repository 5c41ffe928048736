"""Domain layer for wallit: entities, errors and ledger services.

Services are imported from their own modules (``wallit.domain.transfer``
and so on); this package only re-exports the plain data types so that the
database layer can import them without pulling the services in.
"""

from wallit.domain.entities import (
    Account,
    Category,
    Currency,
    Movement,
    MovementType,
    NormalizedAmount,
    SplitPart,
    Transfer,
)
from wallit.domain.errors import (
    AuthorizationError,
    ConflictError,
    DomainError,
    ExchangeRateUnavailableError,
    LinkageError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "Account",
    "Category",
    "Currency",
    "Movement",
    "MovementType",
    "NormalizedAmount",
    "SplitPart",
    "Transfer",
    "AuthorizationError",
    "ConflictError",
    "DomainError",
    "ExchangeRateUnavailableError",
    "LinkageError",
    "NotFoundError",
    "ValidationError",
]
