"""Transfer domain service.

A transfer is two movements sharing a ``transfer_id``: an expense leg in the
source account and an income leg in the destination account, each pointing
at the other through ``transfer_pair_id``. Both legs are always written,
edited and deleted together inside one transaction.
"""

from datetime import date
from typing import Optional

from wallit.database.base import Database
from wallit.domain.access import owned_account, owned_movement, require_user
from wallit.domain.currency import CurrencyNormalizer
from wallit.domain.entities import Account, Currency, Movement, MovementType, Transfer
from wallit.domain.errors import (
    LinkageError,
    NotFoundError,
    ValidationError,
    same_account_transfer,
    transfer_not_found,
)
from wallit.domain.exchange_rate import ExchangeRateService
from wallit.domain.movement import validate_amount, validate_currency, validate_name
from wallit.logging_setup import get_logger
from wallit.utils.ids import generate_id

logger = get_logger("wallit.transfer")

FALLBACK_BANK_NAME = "account"


def transfer_names(
    from_bank: Optional[str], to_bank: Optional[str], note: Optional[str] = None
) -> tuple[str, str]:
    """Return (expense leg name, income leg name)."""
    note = (note or "").strip()
    if note:
        validate_name(note)
        return note, note
    return (
        f"Transfer to {to_bank or FALLBACK_BANK_NAME}",
        f"Transfer from {from_bank or FALLBACK_BANK_NAME}",
    )


def split_legs(movements: list[Movement]) -> Optional[tuple[Movement, Movement]]:
    """Return (expense leg, income leg) if movements form a valid pair."""
    if len(movements) != 2:
        return None
    expense = next((m for m in movements if m.type == MovementType.EXPENSE), None)
    income = next((m for m in movements if m.type == MovementType.INCOME), None)
    if expense is None or income is None:
        return None
    return expense, income


class TransferService:
    """Service for creating, editing and deleting transfers."""

    def __init__(self, db: Database, rates: Optional[ExchangeRateService] = None):
        """Initialize transfer service.

        Args:
            db: Database instance
            rates: Exchange rate cache, created on demand if None
        """
        self.db = db
        self.rates = rates if rates is not None else ExchangeRateService(db)
        self.normalizer = CurrencyNormalizer(self.rates)

    def _load(self, user_id: str, transfer_id: str) -> Transfer:
        legs = split_legs(self.db.get_transfer_movements(transfer_id, user_id))
        if legs is None:
            raise NotFoundError(transfer_not_found(transfer_id))
        expense, income = legs
        return Transfer(transfer_id=transfer_id, from_movement=expense, to_movement=income)

    def _leg_account(self, movement: Movement, user_id: str) -> Optional[Account]:
        if movement.account_id is None:
            return None
        return self.db.get_account(movement.account_id, user_id)

    def create_transfer(
        self,
        user_id: str,
        from_account_id: str,
        to_account_id: str,
        from_amount: int,
        date: date,
        to_amount: Optional[int] = None,
        from_currency: Optional[Currency | str] = None,
        to_currency: Optional[Currency | str] = None,
        note: Optional[str] = None,
        time: Optional[str] = None,
    ) -> Transfer:
        """Create a transfer between two of the user's accounts.

        Args:
            user_id: Current user
            from_account_id: Source account
            to_account_id: Destination account
            from_amount: Amount leaving the source, in from_currency
            date: Transfer date
            to_amount: Amount arriving, in to_currency. Defaults to
                from_amount converted into to_currency.
            from_currency: Input currency of the source leg (account currency by default)
            to_currency: Input currency of the destination leg (account currency by default)
            note: Optional name for both legs
            time: Optional time of day

        Returns:
            The created transfer

        Raises:
            ValidationError: If accounts are equal or amounts are not positive
            NotFoundError: If either account is not owned by the user
            ExchangeRateUnavailableError: If a rate is needed and unavailable
        """
        user_id = require_user(user_id)
        if from_account_id == to_account_id:
            raise ValidationError(same_account_transfer())
        validate_amount(from_amount, "Source amount")
        if to_amount is not None:
            validate_amount(to_amount, "Destination amount")

        from_account = owned_account(self.db, from_account_id, user_id)
        to_account = owned_account(self.db, to_account_id, user_id)
        from_input = validate_currency(from_currency) if from_currency else from_account.currency
        to_input = validate_currency(to_currency) if to_currency else to_account.currency
        expense_name, income_name = transfer_names(from_account.bank_name, to_account.bank_name, note)

        if to_amount is None:
            to_amount = self.normalizer.convert(from_amount, from_input, to_input)
            validate_amount(to_amount, "Destination amount")
        from_leg = self.normalizer.normalize(from_amount, from_input, from_account.currency)
        to_leg = self.normalizer.normalize(to_amount, to_input, to_account.currency)

        transfer_id = generate_id()
        from_movement_id = generate_id()
        to_movement_id = generate_id()

        with self.db.atomic():
            self.db.create_movement(
                movement_id=from_movement_id,
                user_id=user_id,
                account_id=from_account.id,
                category_id=None,
                name=expense_name,
                date=date,
                time=time,
                amount=from_leg.amount,
                amount_usd=from_leg.amount_usd,
                exchange_rate=from_leg.exchange_rate,
                currency=from_input.value,
                type=MovementType.EXPENSE.value,
                transfer_id=transfer_id,
                transfer_pair_id=to_movement_id,
            )
            self.db.create_movement(
                movement_id=to_movement_id,
                user_id=user_id,
                account_id=to_account.id,
                category_id=None,
                name=income_name,
                date=date,
                time=time,
                amount=to_leg.amount,
                amount_usd=to_leg.amount_usd,
                exchange_rate=to_leg.exchange_rate,
                currency=to_input.value,
                type=MovementType.INCOME.value,
                transfer_id=transfer_id,
                transfer_pair_id=from_movement_id,
            )

        logger.info("Created transfer %s from %s to %s", transfer_id, from_account.id, to_account.id)
        return self._load(user_id, transfer_id)

    def get_transfer(self, user_id: str, movement_id: str) -> Optional[Transfer]:
        """Get both legs of the transfer a movement belongs to.

        Returns:
            The transfer, or None if the movement is not part of a valid pair

        Raises:
            NotFoundError: If the movement is not owned by the user
        """
        user_id = require_user(user_id)
        movement = owned_movement(self.db, movement_id, user_id)
        if movement.transfer_id is None:
            return None
        try:
            return self._load(user_id, movement.transfer_id)
        except NotFoundError:
            logger.warning("Transfer %s does not have two valid legs", movement.transfer_id)
            return None

    def update_transfer(
        self,
        user_id: str,
        transfer_id: str,
        from_amount: int,
        to_amount: int,
        date: date,
        from_currency: Optional[Currency | str] = None,
        to_currency: Optional[Currency | str] = None,
        note: Optional[str] = None,
    ) -> Transfer:
        """Edit amounts, date and note of both legs.

        Accounts and direction never change. Each leg is renormalized against
        its own account currency.

        Raises:
            ValidationError: If amounts are not positive
            NotFoundError: If the transfer does not exist for the user
            ExchangeRateUnavailableError: If a rate is needed and unavailable
        """
        user_id = require_user(user_id)
        validate_amount(from_amount, "Source amount")
        validate_amount(to_amount, "Destination amount")
        transfer = self._load(user_id, transfer_id)
        expense, income = transfer.from_movement, transfer.to_movement

        from_account = self._leg_account(expense, user_id)
        to_account = self._leg_account(income, user_id)
        from_input = validate_currency(from_currency) if from_currency else (
            from_account.currency if from_account else expense.currency
        )
        to_input = validate_currency(to_currency) if to_currency else (
            to_account.currency if to_account else income.currency
        )
        expense_name, income_name = transfer_names(
            from_account.bank_name if from_account else None,
            to_account.bank_name if to_account else None,
            note,
        )

        from_leg = self.normalizer.normalize(
            from_amount, from_input, from_account.currency if from_account else from_input
        )
        to_leg = self.normalizer.normalize(
            to_amount, to_input, to_account.currency if to_account else to_input
        )

        with self.db.atomic():
            self.db.update_movement(
                expense.id,
                name=expense_name,
                date=date,
                amount=from_leg.amount,
                amount_usd=from_leg.amount_usd,
                exchange_rate=from_leg.exchange_rate,
                currency=from_input.value,
            )
            self.db.update_movement(
                income.id,
                name=income_name,
                date=date,
                amount=to_leg.amount,
                amount_usd=to_leg.amount_usd,
                exchange_rate=to_leg.exchange_rate,
                currency=to_input.value,
            )

        logger.info("Updated transfer %s", transfer_id)
        return self._load(user_id, transfer_id)

    def delete_transfer(self, user_id: str, transfer_id: str) -> None:
        """Delete both legs of a transfer.

        Raises:
            NotFoundError: If the transfer does not exist for the user
        """
        user_id = require_user(user_id)
        if not self.db.get_transfer_movements(transfer_id, user_id):
            raise NotFoundError(transfer_not_found(transfer_id))
        with self.db.atomic():
            self.db.delete_transfer_movements(transfer_id, user_id)
        logger.info("Deleted transfer %s", transfer_id)

    def convert_to_transfer(
        self,
        user_id: str,
        movement_id: str,
        to_account_id: str,
        to_amount: Optional[int] = None,
        to_currency: Optional[Currency | str] = None,
        note: Optional[str] = None,
    ) -> Transfer:
        """Turn an existing movement into one leg of a new transfer.

        A paired movement of the opposite type is created in the destination
        account and the original is linked to it in place. Both legs lose
        their category and leave the review queue.

        Args:
            user_id: Current user
            movement_id: Existing movement to convert
            to_account_id: Account of the new paired movement
            to_amount: Amount of the paired movement in to_currency. Defaults
                to the movement's amount converted into to_currency.
            to_currency: Input currency of the paired movement
            note: Optional name for both legs

        Raises:
            LinkageError: If the movement already belongs to a transfer or is a receivable
            ValidationError: If the movement has no account or the accounts are equal
            NotFoundError: If the movement or an account is not owned by the user
        """
        user_id = require_user(user_id)
        movement = owned_movement(self.db, movement_id, user_id)
        if movement.transfer_id is not None:
            raise LinkageError("This movement is already a transfer")
        if movement.receivable or movement.receivable_id is not None:
            raise LinkageError("Receivables and their payments cannot become transfers")
        if movement.account_id is None:
            raise ValidationError("The movement must have an account")
        if movement.account_id == to_account_id:
            raise ValidationError(same_account_transfer())
        if to_amount is not None:
            validate_amount(to_amount, "Destination amount")

        own_account = owned_account(self.db, movement.account_id, user_id)
        other_account = owned_account(self.db, to_account_id, user_id)
        to_input = validate_currency(to_currency) if to_currency else other_account.currency

        paired_type = movement.type.opposite
        if movement.type == MovementType.EXPENSE:
            expense_name, income_name = transfer_names(own_account.bank_name, other_account.bank_name, note)
            original_name, paired_name = expense_name, income_name
        else:
            expense_name, income_name = transfer_names(other_account.bank_name, own_account.bank_name, note)
            original_name, paired_name = income_name, expense_name

        if to_amount is None:
            to_amount = self.normalizer.convert(movement.input_amount, movement.currency, to_input)
            validate_amount(to_amount, "Destination amount")
        paired = self.normalizer.normalize(to_amount, to_input, other_account.currency)

        transfer_id = generate_id()
        paired_id = generate_id()

        original_fields = dict(
            name=original_name,
            transfer_id=transfer_id,
            transfer_pair_id=paired_id,
            category_id=None,
            needs_review=False,
        )
        if movement.original_name is None and original_name != movement.name:
            original_fields["original_name"] = movement.name

        with self.db.atomic():
            self.db.create_movement(
                movement_id=paired_id,
                user_id=user_id,
                account_id=other_account.id,
                category_id=None,
                name=paired_name,
                date=movement.date,
                time=movement.time,
                amount=paired.amount,
                amount_usd=paired.amount_usd,
                exchange_rate=paired.exchange_rate,
                currency=to_input.value,
                type=paired_type.value,
                needs_review=False,
                transfer_id=transfer_id,
                transfer_pair_id=movement.id,
            )
            self.db.update_movement(movement.id, **original_fields)

        logger.info("Converted movement %s into transfer %s", movement.id, transfer_id)
        return self._load(user_id, transfer_id)
