"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import date, datetime
from typing import Any, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from wallit.domain.entities import (
    Account,
    Category,
    CategorySpending,
    DailyTotals,
    ExchangeRate,
    Movement,
    MovementTotals,
)


class Database(ABC):
    """Abstract database interface for wallit.

    Every read of a user-owned row takes the owner's ``user_id`` and returns
    ``None`` both for missing rows and for rows owned by someone else.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Run the enclosed writes as one transaction.

        Writes inside the block become visible only when it exits cleanly;
        an exception rolls every one of them back. Nested blocks join the
        outermost one.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        account_id: str,
        user_id: str,
        bank_name: str,
        account_type: str,
        last_four_digits: str,
        currency: str,
        initial_balance: int = 0,
        color: Optional[str] = None,
        emoji: Optional[str] = None,
    ) -> str:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: str, user_id: str) -> Optional[Account]:
        """Get an account owned by user_id."""
        pass

    @abstractmethod
    def list_accounts(self, user_id: str) -> list[Account]:
        """List a user's accounts ordered by bank name."""
        pass

    @abstractmethod
    def delete_account(self, account_id: str) -> None:
        """Delete an account. Its movements keep existing without an account."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, category_id: str, user_id: str, name: str, emoji: str) -> str:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: str, user_id: str) -> Optional[Category]:
        """Get a category owned by user_id."""
        pass

    @abstractmethod
    def list_categories(self, user_id: str) -> list[Category]:
        """List a user's categories ordered by name."""
        pass

    @abstractmethod
    def delete_category(self, category_id: str) -> None:
        """Delete a category. Its movements become uncategorized."""
        pass

    # Movement operations
    @abstractmethod
    def create_movement(
        self,
        movement_id: str,
        user_id: str,
        account_id: Optional[str],
        name: str,
        date: date,
        amount: int,
        type: str,
        currency: str,
        category_id: Optional[str] = None,
        time: Optional[str] = None,
        amount_usd: Optional[int] = None,
        exchange_rate: Optional[int] = None,
        needs_review: bool = False,
        receivable: bool = False,
        received: bool = False,
        receivable_id: Optional[str] = None,
        transfer_id: Optional[str] = None,
        transfer_pair_id: Optional[str] = None,
        original_name: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> str:
        """Create a movement. Returns movement ID."""
        pass

    @abstractmethod
    def get_movement(self, movement_id: str, user_id: str) -> Optional[Movement]:
        """Get a movement owned by user_id."""
        pass

    @abstractmethod
    def update_movement(self, movement_id: str, **fields: Any) -> None:
        """Update columns of a movement.

        Only known movement columns are accepted; linkage columns are set
        through this method by the specialized ledger operations only.
        """
        pass

    @abstractmethod
    def delete_movement(self, movement_id: str) -> None:
        """Delete a single movement."""
        pass

    @abstractmethod
    def list_movements(
        self,
        user_id: str,
        account_id: Optional[str] = None,
        needs_review: Optional[bool] = None,
        receivable: Optional[bool] = None,
        received: Optional[bool] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Movement]:
        """List movements, newest first (date desc, created_at desc)."""
        pass

    @abstractmethod
    def count_movements(
        self,
        user_id: str,
        account_id: Optional[str] = None,
        needs_review: Optional[bool] = None,
        receivable: Optional[bool] = None,
        received: Optional[bool] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> int:
        """Count movements matching the same filters as list_movements."""
        pass

    @abstractmethod
    def get_transfer_movements(self, transfer_id: str, user_id: str) -> list[Movement]:
        """Get the movements sharing a transfer ID."""
        pass

    @abstractmethod
    def delete_transfer_movements(self, transfer_id: str, user_id: str) -> int:
        """Delete every movement sharing a transfer ID. Returns rows deleted."""
        pass

    @abstractmethod
    def get_payments_for_receivable(self, receivable_id: str, user_id: str) -> list[Movement]:
        """Get movements whose receivable_id points at receivable_id."""
        pass

    # Aggregates
    @abstractmethod
    def get_movement_totals_by_account(self, user_id: str) -> dict[str, MovementTotals]:
        """Sum income and expense per account, keyed by account ID.

        The USD sums use ``amount_usd`` when present and fall back to
        ``amount`` otherwise.
        """
        pass

    @abstractmethod
    def get_daily_net(self, account_id: str, user_id: str, usd: bool = False) -> list[tuple[date, int]]:
        """Net (income - expense) of an account per day, oldest first."""
        pass

    @abstractmethod
    def get_daily_totals(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
        category_id: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> list[DailyTotals]:
        """Income/expense per day, excluding receivables and their payments."""
        pass

    @abstractmethod
    def get_category_spending(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
        category_id: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> list[CategorySpending]:
        """Expense totals per category, largest first."""
        pass

    # Exchange rate cache
    @abstractmethod
    def get_latest_exchange_rate(self, from_currency: str, to_currency: str) -> Optional[ExchangeRate]:
        """Get the most recently fetched rate for a currency pair."""
        pass

    @abstractmethod
    def get_exchange_rate(self, rate_id: str) -> Optional[ExchangeRate]:
        """Get a cached rate by ID."""
        pass

    @abstractmethod
    def insert_exchange_rate(
        self,
        rate_id: str,
        from_currency: str,
        to_currency: str,
        rate: int,
        source: str,
        fetched_at: datetime,
    ) -> None:
        """Insert a cache row.

        Raises:
            ConflictError: If a row with rate_id already exists
        """
        pass
