"""Account domain service."""

import re
from typing import Optional

from wallit.database.base import Database
from wallit.domain.access import owned_account, require_user
from wallit.domain.entities import Account, Currency, LOCAL_CURRENCY
from wallit.domain.errors import ValidationError
from wallit.domain.movement import validate_currency
from wallit.logging_setup import get_logger
from wallit.utils.ids import generate_id

logger = get_logger("wallit.account")

LAST_FOUR_PATTERN = re.compile(r"^\d{4}$")


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        user_id: str,
        bank_name: str,
        account_type: str,
        last_four_digits: str,
        currency: Currency | str = LOCAL_CURRENCY,
        initial_balance: int = 0,
        color: Optional[str] = None,
        emoji: Optional[str] = None,
    ) -> Account:
        """Create a new account.

        Args:
            user_id: Current user
            bank_name: Bank name
            account_type: Account type (e.g. "Corriente", "Vista")
            last_four_digits: Exactly four digits identifying the account
            currency: Account currency
            initial_balance: Opening balance in minor units of the currency
            color: Optional display color
            emoji: Optional display emoji

        Returns:
            The created account

        Raises:
            ValidationError: If any field is invalid
        """
        user_id = require_user(user_id)
        bank_name = (bank_name or "").strip()
        account_type = (account_type or "").strip()
        last_four_digits = (last_four_digits or "").strip()

        if not bank_name:
            raise ValidationError("Bank is required")
        if not account_type:
            raise ValidationError("Account type is required")
        if not LAST_FOUR_PATTERN.match(last_four_digits):
            raise ValidationError("Last 4 digits must be exactly 4 numbers")
        if isinstance(initial_balance, bool) or not isinstance(initial_balance, int):
            raise ValidationError("Initial balance must be an integer")
        account_currency = validate_currency(currency)

        account_id = self.db.create_account(
            account_id=generate_id(),
            user_id=user_id,
            bank_name=bank_name,
            account_type=account_type,
            last_four_digits=last_four_digits,
            currency=account_currency.value,
            initial_balance=initial_balance,
            color=color,
            emoji=emoji,
        )
        logger.info("Created %s account %s for user %s", account_currency.value, account_id, user_id)
        return owned_account(self.db, account_id, user_id)

    def get_account(self, user_id: str, account_id: str) -> Account:
        """Get an account owned by the user.

        Raises:
            NotFoundError: If the account is missing or owned by someone else
        """
        user_id = require_user(user_id)
        return owned_account(self.db, account_id, user_id)

    def list_accounts(self, user_id: str) -> list[Account]:
        """List the user's accounts ordered by bank name."""
        user_id = require_user(user_id)
        return self.db.list_accounts(user_id)

    def delete_account(self, user_id: str, account_id: str) -> None:
        """Delete an account.

        Its movements are kept with no account.

        Raises:
            NotFoundError: If the account is missing or owned by someone else
        """
        user_id = require_user(user_id)
        account = owned_account(self.db, account_id, user_id)
        self.db.delete_account(account.id)
        logger.info("Deleted account %s", account.id)
