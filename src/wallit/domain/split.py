"""Split domain service."""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Iterable

from wallit.database.base import Database
from wallit.domain.access import owned_movement, require_user
from wallit.domain.entities import LOCAL_CURRENCY, Movement, SplitPart
from wallit.domain.errors import LinkageError, ValidationError, split_sum_mismatch
from wallit.domain.movement import validate_amount, validate_name
from wallit.logging_setup import get_logger
from wallit.utils.date_parser import utc_now
from wallit.utils.ids import generate_id

logger = get_logger("wallit.split")

MIN_PARTS = 2
MAX_PARTS = 20
# Parts sort ahead of everything else in the review queue
CREATED_AT_OFFSET = timedelta(seconds=1)


def prorate_usd(original: Movement, amounts: list[int]) -> list[int | None]:
    """Shares of the original USD amount for parts with the given local amounts.

    Each share is floored and the leftover cents go to the parts with the
    largest remainders, so the shares always add up to ``original.amount_usd``.
    """
    if original.amount_usd is None:
        return [None] * len(amounts)
    exact = [Decimal(original.amount_usd) * amount / original.amount for amount in amounts]
    shares = [int(value) for value in exact]
    leftover = original.amount_usd - sum(shares)
    by_remainder = sorted(range(len(exact)), key=lambda i: exact[i] - shares[i], reverse=True)
    for i in by_remainder[:leftover]:
        shares[i] += 1
    return shares


class SplitService:
    """Service that replaces one movement with several smaller ones."""

    def __init__(self, db: Database, clock: Callable[[], datetime] = utc_now):
        """Initialize split service.

        Args:
            db: Database instance
            clock: Returns the current aware UTC time
        """
        self.db = db
        self.clock = clock

    def split_movement(self, user_id: str, movement_id: str, parts: Iterable[SplitPart]) -> list[Movement]:
        """Split a movement into parts whose amounts add up to the original.

        The original is deleted and one movement per part is inserted in the
        same transaction. Each part inherits account, category, type,
        currency, exchange rate, date and time, lands in the review queue and
        gets a prorated ``amount_usd`` when the original carried one. The USD
        shares add up to the original, so account balances do not move.

        Parts keep the imported name as ``original_name``: the original's
        ``original_name`` when it has one, otherwise its current name, since
        every part is renamed.

        Args:
            user_id: Current user
            movement_id: Movement to split
            parts: Between 2 and 20 SplitPart values

        Returns:
            The new movements, in the order of ``parts``

        Raises:
            ValidationError: If the part count, a name or an amount is invalid,
                or the amounts do not add up to the original amount
            NotFoundError: If the movement is not owned by the user
            LinkageError: If the movement is a transfer leg, a receivable or a
                receivable payment
        """
        user_id = require_user(user_id)
        parts = list(parts)
        if not MIN_PARTS <= len(parts) <= MAX_PARTS:
            raise ValidationError(f"A split needs between {MIN_PARTS} and {MAX_PARTS} parts")

        original = owned_movement(self.db, movement_id, user_id)
        if original.transfer_id is not None:
            raise LinkageError("Transfers cannot be split")
        if original.receivable or original.receivable_id is not None:
            raise LinkageError("Receivables and their payments cannot be split")

        cleaned = [
            SplitPart(name=validate_name(part.name), amount=validate_amount(part.amount, "Part amount"))
            for part in parts
        ]
        total = sum(part.amount for part in cleaned)
        if total != original.amount:
            raise ValidationError(split_sum_mismatch(original.amount, total, LOCAL_CURRENCY.value))

        created_at = self.clock() + CREATED_AT_OFFSET
        tag = original.original_name or original.name
        new_ids = [generate_id() for _ in cleaned]
        usd_shares = prorate_usd(original, [part.amount for part in cleaned])

        with self.db.atomic():
            self.db.delete_movement(original.id)
            for new_id, part, amount_usd in zip(new_ids, cleaned, usd_shares):
                self.db.create_movement(
                    movement_id=new_id,
                    user_id=user_id,
                    account_id=original.account_id,
                    category_id=original.category_id,
                    name=part.name,
                    date=original.date,
                    time=original.time,
                    amount=part.amount,
                    amount_usd=amount_usd,
                    exchange_rate=original.exchange_rate,
                    currency=original.currency.value,
                    type=original.type.value,
                    needs_review=True,
                    original_name=tag,
                    created_at=created_at,
                )

        logger.info("Split movement %s into %d parts", original.id, len(cleaned))
        return [owned_movement(self.db, new_id, user_id) for new_id in new_ids]
