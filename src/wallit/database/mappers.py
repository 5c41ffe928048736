"""Mapper functions to convert SQLAlchemy models into domain entities.

SQLite hands datetimes back without a timezone; every timestamp leaving this
layer is an aware UTC datetime.
"""

from wallit.domain import entities as domain
from wallit.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Movement as ORMMovement,
    ExchangeRate as ORMExchangeRate,
)
from wallit.utils.date_parser import as_utc


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        user_id=orm_account.user_id,
        bank_name=orm_account.bank_name,
        account_type=orm_account.account_type,
        last_four_digits=orm_account.last_four_digits,
        currency=domain.Currency(orm_account.currency),
        initial_balance=orm_account.initial_balance,
        created_at=as_utc(orm_account.created_at),
        color=orm_account.color,
        emoji=orm_account.emoji,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        user_id=orm_category.user_id,
        name=orm_category.name,
        emoji=orm_category.emoji,
        created_at=as_utc(orm_category.created_at),
    )


def movement_to_domain(orm_movement: ORMMovement) -> domain.Movement:
    """Convert SQLAlchemy Movement model to domain Movement entity."""
    return domain.Movement(
        id=orm_movement.id,
        user_id=orm_movement.user_id,
        account_id=orm_movement.account_id,
        category_id=orm_movement.category_id,
        name=orm_movement.name,
        date=orm_movement.date,
        time=orm_movement.time,
        amount=orm_movement.amount,
        amount_usd=orm_movement.amount_usd,
        exchange_rate=orm_movement.exchange_rate,
        currency=domain.Currency(orm_movement.currency),
        type=domain.MovementType(orm_movement.type),
        needs_review=bool(orm_movement.needs_review),
        receivable=bool(orm_movement.receivable),
        received=bool(orm_movement.received),
        receivable_id=orm_movement.receivable_id,
        transfer_id=orm_movement.transfer_id,
        transfer_pair_id=orm_movement.transfer_pair_id,
        original_name=orm_movement.original_name,
        created_at=as_utc(orm_movement.created_at),
        updated_at=as_utc(orm_movement.updated_at),
    )


def exchange_rate_to_domain(orm_rate: ORMExchangeRate) -> domain.ExchangeRate:
    """Convert SQLAlchemy ExchangeRate model to domain ExchangeRate entity."""
    return domain.ExchangeRate(
        id=orm_rate.id,
        from_currency=domain.Currency(orm_rate.from_currency),
        to_currency=domain.Currency(orm_rate.to_currency),
        rate=orm_rate.rate,
        source=orm_rate.source,
        fetched_at=as_utc(orm_rate.fetched_at),
    )
