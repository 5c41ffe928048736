"""Balance domain service.

Balances are never stored; they are recomputed from the movement table on
every call. Conversions to the local currency are for display only.
"""

from datetime import timedelta
from typing import Optional

from wallit.database.base import Database
from wallit.domain.access import owned_account, require_user
from wallit.domain.currency import CurrencyNormalizer, usd_to_local
from wallit.domain.entities import (
    Account,
    AccountBalance,
    BalancePoint,
    Currency,
    LOCAL_CURRENCY,
    MovementTotals,
)
from wallit.domain.exchange_rate import ExchangeRateService
from wallit.logging_setup import get_logger

logger = get_logger("wallit.balance")


def account_balance(account: Account, totals: Optional[MovementTotals]) -> int:
    """Initial balance plus income minus expense, in the account's currency.

    USD accounts sum the USD slot, falling back to the local slot for rows
    that never got one.
    """
    if totals is None:
        return account.initial_balance
    if account.currency == Currency.USD:
        return account.initial_balance + totals.income_usd - totals.expense_usd
    return account.initial_balance + totals.income - totals.expense


class BalanceService:
    """Service for per-account and total balances."""

    def __init__(self, db: Database, rates: Optional[ExchangeRateService] = None):
        """Initialize balance service.

        Args:
            db: Database instance
            rates: Exchange rate cache, created on demand if None
        """
        self.db = db
        self.rates = rates if rates is not None else ExchangeRateService(db)
        self.normalizer = CurrencyNormalizer(self.rates)

    def get_account_balances(self, user_id: str) -> list[AccountBalance]:
        """Balances of all of the user's accounts, in account currency."""
        user_id = require_user(user_id)
        totals = self.db.get_movement_totals_by_account(user_id)
        return [
            AccountBalance(account=account, balance=account_balance(account, totals.get(account.id)))
            for account in self.db.list_accounts(user_id)
        ]

    def get_account_balance(self, user_id: str, account_id: str) -> AccountBalance:
        """Balance of one account.

        Raises:
            NotFoundError: If the account is not owned by the user
        """
        user_id = require_user(user_id)
        account = owned_account(self.db, account_id, user_id)
        totals = self.db.get_movement_totals_by_account(user_id)
        return AccountBalance(account=account, balance=account_balance(account, totals.get(account.id)))

    def get_total_balance(self, user_id: str) -> int:
        """Sum of all balances in the local currency.

        A rate is only requested when some USD account holds a non-zero balance.

        Raises:
            ExchangeRateUnavailableError: If a rate is needed and unavailable
        """
        balances = self.get_account_balances(user_id)
        total = sum(b.balance for b in balances if b.account.currency == LOCAL_CURRENCY)
        usd_balances = [b.balance for b in balances if b.account.currency == Currency.USD and b.balance]
        if usd_balances:
            rate = self.normalizer.current_rate()
            total += sum(usd_to_local(balance, rate) for balance in usd_balances)
        return total

    def get_balance_history(self, user_id: str, account_id: str) -> list[BalancePoint]:
        """Running end-of-day balance of an account, oldest first.

        The first point is the day before the first movement, holding the
        initial balance. An account without movements has no history.

        Raises:
            NotFoundError: If the account is not owned by the user
        """
        user_id = require_user(user_id)
        account = owned_account(self.db, account_id, user_id)
        daily = self.db.get_daily_net(account.id, user_id, usd=account.currency == Currency.USD)
        if not daily:
            return []

        balance = account.initial_balance
        points = [BalancePoint(date=daily[0][0] - timedelta(days=1), balance=balance)]
        for day, net in daily:
            balance += net
            points.append(BalancePoint(date=day, balance=balance))
        return points
