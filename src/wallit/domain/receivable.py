"""Receivable domain service.

A receivable is an ordinary movement flagged as money owed to the user. It is
resolved either by a new income movement created for the purpose, by an
existing income movement, or by nothing at all (settled in cash).
"""

from datetime import datetime
from typing import Callable, Optional

from wallit.config import DEFAULT_TIMEZONE
from wallit.database.base import Database
from wallit.domain.access import owned_account, owned_movement, require_user
from wallit.domain.currency import CurrencyNormalizer
from wallit.domain.entities import Movement, MovementType
from wallit.domain.errors import LinkageError
from wallit.domain.exchange_rate import ExchangeRateService
from wallit.domain.movement import validate_name
from wallit.logging_setup import get_logger
from wallit.utils.date_parser import local_today, utc_now
from wallit.utils.ids import generate_id

logger = get_logger("wallit.receivable")


def payment_name(receivable: Movement) -> str:
    return f"Payment: {receivable.name}"[:200]


class ReceivableService:
    """Service for marking and resolving receivables."""

    def __init__(
        self,
        db: Database,
        rates: Optional[ExchangeRateService] = None,
        clock: Callable[[], datetime] = utc_now,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        """Initialize receivable service.

        Args:
            db: Database instance
            rates: Exchange rate cache, created on demand if None
            clock: Returns the current aware UTC time
            timezone: Timezone used to date new payments
        """
        self.db = db
        self.rates = rates if rates is not None else ExchangeRateService(db, clock=clock)
        self.normalizer = CurrencyNormalizer(self.rates)
        self.clock = clock
        self.timezone = timezone

    def mark_receivable(self, user_id: str, movement_id: str, reminder_text: Optional[str] = None) -> Movement:
        """Flag a movement as a receivable.

        Type and amount are untouched. With reminder_text the movement is
        renamed, keeping the previous name in ``original_name``.

        Raises:
            NotFoundError: If the movement is not owned by the user
            LinkageError: If the movement is a transfer leg or a receivable payment
        """
        user_id = require_user(user_id)
        movement = owned_movement(self.db, movement_id, user_id)
        if movement.transfer_id is not None:
            raise LinkageError("Transfers cannot be receivables")
        if movement.receivable_id is not None:
            raise LinkageError("A receivable payment cannot itself be a receivable")

        fields: dict = {"receivable": True, "needs_review": False}
        if reminder_text is not None and reminder_text.strip():
            name = validate_name(reminder_text)
            fields["name"] = name
            if movement.original_name is None and name != movement.name:
                fields["original_name"] = movement.name

        self.db.update_movement(movement.id, **fields)
        return owned_movement(self.db, movement.id, user_id)

    def unmark_receivable(self, user_id: str, movement_id: str) -> Movement:
        """Remove the receivable flag, deleting any payment linked to it.

        Raises:
            NotFoundError: If the movement is not owned by the user
        """
        user_id = require_user(user_id)
        movement = owned_movement(self.db, movement_id, user_id)
        payments = self.db.get_payments_for_receivable(movement.id, user_id)

        with self.db.atomic():
            for payment in payments:
                self.db.delete_movement(payment.id)
            self.db.update_movement(movement.id, receivable=False, received=False)

        if payments:
            logger.info("Deleted %d payment(s) of receivable %s", len(payments), movement.id)
        return owned_movement(self.db, movement.id, user_id)

    def _unresolved(self, user_id: str, movement_id: str) -> Movement:
        movement = owned_movement(self.db, movement_id, user_id)
        if not movement.receivable:
            raise LinkageError("Movement is not a receivable")
        if movement.received:
            raise LinkageError("Receivable was already received")
        return movement

    def mark_as_received(
        self, user_id: str, movement_id: str, account_id: Optional[str] = None
    ) -> Optional[Movement]:
        """Resolve a receivable, optionally recording the payment.

        With account_id an income movement dated today is created in that
        account, with the receivable's amount and currency, pointing back
        through ``receivable_id``. Without it the receivable is only marked
        received (settled outside any tracked account).

        Returns:
            The new payment movement, or None when no account was given

        Raises:
            NotFoundError: If the movement or account is not owned by the user
            LinkageError: If the movement is not an unresolved receivable
            ExchangeRateUnavailableError: If a rate is needed and unavailable
        """
        user_id = require_user(user_id)
        receivable = self._unresolved(user_id, movement_id)

        if account_id is None:
            self.db.update_movement(receivable.id, received=True)
            logger.info("Receivable %s settled without a payment movement", receivable.id)
            return None

        account = owned_account(self.db, account_id, user_id)
        normalized = self.normalizer.normalize(receivable.input_amount, receivable.currency, account.currency)
        payment_id = generate_id()

        with self.db.atomic():
            self.db.update_movement(receivable.id, received=True)
            self.db.create_movement(
                movement_id=payment_id,
                user_id=user_id,
                account_id=account.id,
                name=payment_name(receivable),
                date=local_today(self.timezone, self.clock()),
                amount=normalized.amount,
                amount_usd=normalized.amount_usd,
                exchange_rate=normalized.exchange_rate,
                currency=receivable.currency.value,
                type=MovementType.INCOME.value,
                receivable_id=receivable.id,
            )

        logger.info("Receivable %s paid into account %s", receivable.id, account.id)
        return owned_movement(self.db, payment_id, user_id)

    def mark_as_received_with_existing(self, user_id: str, receivable_id: str, income_id: str) -> Movement:
        """Resolve a receivable with an income movement that already exists.

        Returns:
            The linked income movement

        Raises:
            NotFoundError: If either movement is not owned by the user
            LinkageError: If the receivable is not unresolved, or the income is
                not an income, is already linked, is a transfer leg or is the
                receivable itself
        """
        user_id = require_user(user_id)
        receivable = self._unresolved(user_id, receivable_id)
        income = owned_movement(self.db, income_id, user_id)

        if income.id == receivable.id:
            raise LinkageError("A receivable cannot settle itself")
        if income.type != MovementType.INCOME:
            raise LinkageError("Only an income can settle a receivable")
        if income.receivable_id is not None:
            raise LinkageError("This income already settles another receivable")
        if income.transfer_id is not None:
            raise LinkageError("Transfers cannot settle a receivable")
        if income.receivable:
            raise LinkageError("A receivable cannot settle another receivable")

        with self.db.atomic():
            self.db.update_movement(receivable.id, received=True)
            self.db.update_movement(income.id, receivable_id=receivable.id)

        logger.info("Receivable %s settled by existing income %s", receivable.id, income.id)
        return owned_movement(self.db, income.id, user_id)

    def list_receivables(self, user_id: str, include_received: bool = False) -> list[Movement]:
        """List the user's receivables, newest first."""
        user_id = require_user(user_id)
        received = None if include_received else False
        return self.db.list_movements(user_id, receivable=True, received=received)
