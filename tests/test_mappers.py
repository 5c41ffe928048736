"""Tests for database mappers."""

from datetime import datetime, date, UTC

from wallit.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    ExchangeRate as ORMExchangeRate,
    Movement as ORMMovement,
)
from wallit.database.mappers import (
    account_to_domain,
    category_to_domain,
    exchange_rate_to_domain,
    movement_to_domain,
)
from wallit.domain.entities import Currency, MovementType


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Naive timestamps come back as aware UTC."""
        orm_account = ORMAccount(
            id="acc1",
            user_id="u1",
            bank_name="Banco Estado",
            account_type="Vista",
            last_four_digits="1234",
            currency="USD",
            initial_balance=500,
            created_at=datetime(2025, 1, 2, 3, 4, 5),
        )

        account = account_to_domain(orm_account)

        assert account.id == "acc1"
        assert account.currency == Currency.USD
        assert account.initial_balance == 500
        assert account.created_at == datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert account.color is None


class TestCategoryMapper:
    """Tests for Category mapper."""

    def test_category_to_domain(self):
        now = datetime.now(UTC)
        category = category_to_domain(
            ORMCategory(id="c1", user_id="u1", name="Food", emoji="🍔", created_at=now)
        )

        assert category.name == "Food"
        assert category.emoji == "🍔"
        assert category.created_at == now


class TestMovementMapper:
    """Tests for Movement mapper."""

    def test_movement_to_domain(self):
        created = datetime(2025, 3, 1, 12, 0)
        orm_movement = ORMMovement(
            id="m1",
            user_id="u1",
            account_id="acc1",
            category_id=None,
            name="Netflix",
            date=date(2025, 3, 1),
            time=None,
            amount=1471550,
            amount_usd=1549,
            exchange_rate=95000,
            currency="USD",
            type="expense",
            needs_review=1,
            receivable=0,
            received=0,
            created_at=created,
            updated_at=created,
        )

        movement = movement_to_domain(orm_movement)

        assert movement.type == MovementType.EXPENSE
        assert movement.currency == Currency.USD
        assert movement.needs_review is True
        assert movement.receivable is False
        assert movement.input_amount == 1549
        assert movement.is_transfer is False
        assert movement.normalized.exchange_rate == 95000
        assert movement.updated_at.tzinfo is UTC


class TestExchangeRateMapper:
    """Tests for ExchangeRate mapper."""

    def test_exchange_rate_to_domain(self):
        rate = exchange_rate_to_domain(
            ORMExchangeRate(
                id="USD-CLP-202503101530",
                from_currency="USD",
                to_currency="CLP",
                rate=95000,
                source="open.er-api.com",
                fetched_at=datetime(2025, 3, 10, 15, 30),
            )
        )

        assert rate.from_currency == Currency.USD
        assert rate.to_currency == Currency.CLP
        assert rate.fetched_at == datetime(2025, 3, 10, 15, 30, tzinfo=UTC)
