"""Movement domain service."""

from datetime import date, datetime
from typing import Callable, Optional

from wallit.database.base import Database
from wallit.domain.access import owned_account, owned_category, owned_movement, require_user
from wallit.domain.currency import CurrencyNormalizer
from wallit.domain.entities import Currency, Movement, MovementPage, MovementType
from wallit.domain.errors import LinkageError, ValidationError
from wallit.domain.exchange_rate import ExchangeRateService
from wallit.logging_setup import get_logger
from wallit.utils.date_parser import utc_now
from wallit.utils.ids import generate_id

logger = get_logger("wallit.movement")

MAX_NAME_LENGTH = 200
DEFAULT_PAGE_SIZE = 50


def validate_name(name: Optional[str]) -> str:
    """Return the stripped name or raise ValidationError."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Name is required")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Name must be at most {MAX_NAME_LENGTH} characters")
    return name


def validate_amount(amount: int, label: str = "Amount") -> int:
    """Return amount if it is a positive integer, else raise ValidationError."""
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError(f"{label} must be a positive integer")
    return amount


def validate_type(type: MovementType | str) -> MovementType:
    try:
        return MovementType(type)
    except ValueError as e:
        raise ValidationError(f"Invalid movement type '{type}'") from e


def validate_currency(currency: Currency | str) -> Currency:
    try:
        return Currency(currency.upper() if isinstance(currency, str) else currency)
    except ValueError as e:
        raise ValidationError(f"Unsupported currency '{currency}'") from e


class MovementService:
    """Service for managing movements.

    Linkage columns (transfer and receivable ids) are never accepted here;
    they are owned by TransferService and ReceivableService.
    """

    def __init__(
        self,
        db: Database,
        rates: Optional[ExchangeRateService] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize movement service.

        Args:
            db: Database instance
            rates: Exchange rate cache, created on demand if None
            clock: Returns the current aware UTC time
        """
        self.db = db
        self.rates = rates if rates is not None else ExchangeRateService(db, clock=clock)
        self.normalizer = CurrencyNormalizer(self.rates)
        self.clock = clock

    def create_movement(
        self,
        user_id: str,
        name: str,
        date: date,
        amount: int,
        type: MovementType | str,
        account_id: Optional[str],
        currency: Optional[Currency | str] = None,
        category_id: Optional[str] = None,
        time: Optional[str] = None,
        needs_review: bool = False,
    ) -> Movement:
        """Create a movement.

        Args:
            user_id: Current user
            name: Movement name (1-200 characters)
            date: Movement date
            amount: Positive amount in minor units of ``currency``
            type: "income" or "expense"
            account_id: Owning account (required)
            currency: Input currency, defaults to the account's currency
            category_id: Optional category owned by the user
            time: Optional time of day ("HH:MM")
            needs_review: Whether the movement enters the review queue

        Returns:
            The created movement

        Raises:
            ValidationError: If input is invalid
            NotFoundError: If account or category is missing or not owned
            ExchangeRateUnavailableError: If a rate is needed and unavailable
        """
        user_id = require_user(user_id)
        name = validate_name(name)
        amount = validate_amount(amount)
        movement_type = validate_type(type)
        if not account_id:
            raise ValidationError("Account is required")

        account = owned_account(self.db, account_id, user_id)
        if category_id is not None:
            owned_category(self.db, category_id, user_id)
        input_currency = validate_currency(currency) if currency is not None else account.currency

        normalized = self.normalizer.normalize(amount, input_currency, account.currency)

        movement_id = self.db.create_movement(
            movement_id=generate_id(),
            user_id=user_id,
            account_id=account.id,
            category_id=category_id,
            name=name,
            date=date,
            time=time,
            amount=normalized.amount,
            amount_usd=normalized.amount_usd,
            exchange_rate=normalized.exchange_rate,
            currency=input_currency.value,
            type=movement_type.value,
            needs_review=needs_review,
        )
        logger.info("Created movement %s for user %s", movement_id, user_id)
        return owned_movement(self.db, movement_id, user_id)

    def get_movement(self, user_id: str, movement_id: str) -> Movement:
        """Get a movement owned by the user.

        Raises:
            NotFoundError: If the movement is missing or owned by someone else
        """
        user_id = require_user(user_id)
        return owned_movement(self.db, movement_id, user_id)

    def update_movement(
        self,
        user_id: str,
        movement_id: str,
        name: Optional[str] = None,
        date: Optional[date] = None,
        time: Optional[str] = None,
        amount: Optional[int] = None,
        currency: Optional[Currency | str] = None,
        type: Optional[MovementType | str] = None,
        account_id: Optional[str] = None,
        category_id: Optional[str] = None,
        clear_category: bool = False,
        needs_review: Optional[bool] = None,
    ) -> Movement:
        """Update movement fields.

        Only provided fields change. Amount, currency or account changes are
        renormalized against the (new) account currency. The first rename
        keeps the previous name in ``original_name``.

        Raises:
            ValidationError: If input is invalid
            NotFoundError: If the movement, account or category is not owned
            LinkageError: If the movement is a transfer leg
        """
        user_id = require_user(user_id)
        movement = owned_movement(self.db, movement_id, user_id)
        if movement.is_transfer:
            raise LinkageError("Transfer movements must be edited as a transfer")
        if clear_category and category_id is not None:
            raise ValidationError("Cannot set both category_id and clear_category")

        fields: dict = {}

        if name is not None:
            name = validate_name(name)
            if name != movement.name:
                fields["name"] = name
                if movement.original_name is None:
                    fields["original_name"] = movement.name
        if date is not None:
            fields["date"] = date
        if time is not None:
            fields["time"] = time or None
        if type is not None:
            new_type = validate_type(type)
            if movement.receivable_id is not None and new_type != MovementType.INCOME:
                raise LinkageError("A payment linked to a receivable must stay an income")
            fields["type"] = new_type.value
        if needs_review is not None:
            fields["needs_review"] = needs_review

        if clear_category:
            fields["category_id"] = None
        elif category_id is not None:
            owned_category(self.db, category_id, user_id)
            fields["category_id"] = category_id

        account = None
        if account_id is not None:
            account = owned_account(self.db, account_id, user_id)
            fields["account_id"] = account.id
        elif movement.account_id is not None:
            account = owned_account(self.db, movement.account_id, user_id)

        if amount is not None or currency is not None or account_id is not None:
            new_amount = validate_amount(amount) if amount is not None else movement.input_amount
            input_currency = validate_currency(currency) if currency is not None else movement.currency
            account_currency = account.currency if account is not None else input_currency
            normalized = self.normalizer.normalize(new_amount, input_currency, account_currency)
            fields.update(
                amount=normalized.amount,
                amount_usd=normalized.amount_usd,
                exchange_rate=normalized.exchange_rate,
                currency=input_currency.value,
            )

        if fields:
            self.db.update_movement(movement.id, **fields)
        return owned_movement(self.db, movement.id, user_id)

    def delete_movement(self, user_id: str, movement_id: str) -> None:
        """Delete a movement. Deleting a transfer leg deletes both legs.

        Raises:
            NotFoundError: If the movement is missing or owned by someone else
        """
        user_id = require_user(user_id)
        movement = owned_movement(self.db, movement_id, user_id)
        if movement.transfer_id is not None:
            with self.db.atomic():
                self.db.delete_transfer_movements(movement.transfer_id, user_id)
            logger.info("Deleted transfer %s via movement %s", movement.transfer_id, movement.id)
            return
        self.db.delete_movement(movement.id)

    def list_movements(
        self,
        user_id: str,
        account_id: Optional[str] = None,
        needs_review: Optional[bool] = None,
        receivable: Optional[bool] = None,
        received: Optional[bool] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> MovementPage:
        """List a page of the user's movements, newest first.

        Args:
            user_id: Current user
            account_id: Only movements of this (owned) account
            needs_review: Filter on the review flag
            receivable: Filter on the receivable flag
            received: Filter on the received flag
            start_date: Inclusive lower date bound
            end_date: Inclusive upper date bound
            page: 1-based page number
            page_size: Movements per page

        Returns:
            MovementPage with the items and the total match count
        """
        user_id = require_user(user_id)
        if page < 1:
            raise ValidationError("Page must be at least 1")
        if page_size < 1:
            raise ValidationError("Page size must be at least 1")
        if account_id is not None:
            owned_account(self.db, account_id, user_id)

        filters = dict(
            account_id=account_id,
            needs_review=needs_review,
            receivable=receivable,
            received=received,
            start_date=start_date,
            end_date=end_date,
        )
        items = self.db.list_movements(
            user_id, limit=page_size, offset=(page - 1) * page_size, **filters
        )
        total = self.db.count_movements(user_id, **filters)
        return MovementPage(items=tuple(items), total=total, page=page, page_size=page_size)

    # Review queue
    def pending_review_count(self, user_id: str) -> int:
        """Number of movements waiting for review."""
        user_id = require_user(user_id)
        return self.db.count_movements(user_id, needs_review=True)

    def list_pending_review(self, user_id: str) -> list[Movement]:
        """Movements waiting for review, newest first."""
        user_id = require_user(user_id)
        return self.db.list_movements(user_id, needs_review=True)

    def confirm_movement(self, user_id: str, movement_id: str, **updates) -> Movement:
        """Apply optional updates and take the movement out of the review queue.

        Args:
            user_id: Current user
            movement_id: Movement to confirm
            **updates: Any keyword accepted by update_movement except
                ``needs_review``

        Raises:
            ValidationError: If ``needs_review`` is passed
        """
        if "needs_review" in updates:
            raise ValidationError("Confirming always clears the review flag")
        return self.update_movement(user_id, movement_id, needs_review=False, **updates)
