"""Domain model entities for wallit.

These are pure data classes representing ledger concepts, independent of the
database schema. Services return these and never hand ORM rows to callers.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum
from typing import Optional


class Currency(str, Enum):
    """Supported currencies. CLP is the local currency."""

    CLP = "CLP"
    USD = "USD"


LOCAL_CURRENCY = Currency.CLP


class MovementType(str, Enum):
    """Direction of a movement."""

    INCOME = "income"
    EXPENSE = "expense"

    @property
    def opposite(self) -> "MovementType":
        if self is MovementType.INCOME:
            return MovementType.EXPENSE
        return MovementType.INCOME


@dataclass(frozen=True)
class NormalizedAmount:
    """Dual local/USD representation of a movement amount.

    ``amount`` is always expressed in the owning account's local slot,
    ``amount_usd`` is set whenever the input or the account currency is USD,
    and ``exchange_rate`` is the rate (two implied decimals) used at write
    time.
    """

    amount: int
    amount_usd: Optional[int] = None
    exchange_rate: Optional[int] = None


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: str
    user_id: str
    bank_name: str
    account_type: str
    last_four_digits: str
    currency: Currency
    initial_balance: int
    created_at: datetime
    color: Optional[str] = None
    emoji: Optional[str] = None


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: str
    user_id: str
    name: str
    emoji: str
    created_at: datetime


@dataclass(frozen=True)
class Movement:
    """Movement domain entity: one income or expense ledger entry."""

    id: str
    user_id: str
    account_id: Optional[str]
    category_id: Optional[str]
    name: str
    date: date
    amount: int
    type: MovementType
    currency: Currency
    created_at: datetime
    updated_at: datetime
    time: Optional[str] = None
    amount_usd: Optional[int] = None
    exchange_rate: Optional[int] = None
    needs_review: bool = False
    receivable: bool = False
    received: bool = False
    receivable_id: Optional[str] = None
    transfer_id: Optional[str] = None
    transfer_pair_id: Optional[str] = None
    original_name: Optional[str] = None

    @property
    def normalized(self) -> NormalizedAmount:
        return NormalizedAmount(self.amount, self.amount_usd, self.exchange_rate)

    @property
    def input_amount(self) -> int:
        """Amount as originally entered, in ``currency``."""
        if self.currency == Currency.USD and self.amount_usd is not None:
            return self.amount_usd
        return self.amount

    @property
    def is_transfer(self) -> bool:
        return self.transfer_id is not None


@dataclass(frozen=True)
class ExchangeRate:
    """Cached exchange rate entry."""

    id: str
    from_currency: Currency
    to_currency: Currency
    rate: int
    source: str
    fetched_at: datetime


@dataclass(frozen=True)
class Transfer:
    """Both legs of a transfer."""

    transfer_id: str
    from_movement: Movement
    to_movement: Movement


@dataclass(frozen=True)
class SplitPart:
    """One requested part of a split."""

    name: str
    amount: int


@dataclass(frozen=True)
class MovementPage:
    """A page of movements plus the data needed to paginate."""

    items: tuple[Movement, ...]
    total: int
    page: int
    page_size: int

    @property
    def has_next(self) -> bool:
        return self.page * self.page_size < self.total


@dataclass(frozen=True)
class MovementTotals:
    """Income/expense sums for one account, in both amount slots."""

    income: int = 0
    expense: int = 0
    income_usd: int = 0
    expense_usd: int = 0


@dataclass(frozen=True)
class AccountBalance:
    """Account with its computed balance in the account's currency."""

    account: Account
    balance: int


@dataclass(frozen=True)
class BalancePoint:
    """Running balance of an account at the end of a day."""

    date: date
    balance: int


@dataclass(frozen=True)
class DailyTotals:
    """Income and expense sums for one day."""

    date: date
    income: int
    expense: int
    count: int = 0


@dataclass(frozen=True)
class CategorySpending:
    """Expense total for one category (None for uncategorized)."""

    category_id: Optional[str]
    name: str
    emoji: str
    total: int
    count: int


@dataclass(frozen=True)
class ReportData:
    """Aggregates for a reporting period."""

    start_date: date
    end_date: date
    total_income: int
    total_expense: int
    movement_count: int
    daily: tuple[DailyTotals, ...] = field(default_factory=tuple)
    category_spending: tuple[CategorySpending, ...] = field(default_factory=tuple)
