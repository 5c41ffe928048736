"""Tests for MovementService."""

from datetime import date

import pytest

from wallit.domain.entities import Currency, MovementType
from wallit.domain.errors import (
    AuthorizationError,
    ExchangeRateUnavailableError,
    LinkageError,
    NotFoundError,
    ValidationError,
)


def _expense(movement_service, user_id, account, amount=15000, **kwargs):
    kwargs.setdefault("name", "Supermercado")
    kwargs.setdefault("date", date(2025, 3, 5))
    return movement_service.create_movement(
        user_id=user_id, amount=amount, type="expense", account_id=account.id, **kwargs
    )


def test_create_local_movement(movement_service, user_id, clp_account, food_category, rate_source):
    movement = _expense(movement_service, user_id, clp_account, category_id=food_category.id, time="13:45")

    assert movement.user_id == user_id
    assert movement.account_id == clp_account.id
    assert movement.category_id == food_category.id
    assert movement.type == MovementType.EXPENSE
    assert movement.currency == Currency.CLP
    assert movement.amount == 15000
    assert movement.amount_usd is None
    assert movement.exchange_rate is None
    assert movement.time == "13:45"
    assert movement.needs_review is False
    assert rate_source.calls == 0


def test_create_usd_movement_in_local_account(movement_service, user_id, clp_account):
    movement = _expense(movement_service, user_id, clp_account, amount=1549, currency="USD")

    assert movement.currency == Currency.USD
    assert movement.amount_usd == 1549
    assert movement.amount == 1471550
    assert movement.exchange_rate == 95000
    assert movement.input_amount == 1549


def test_create_in_usd_account_defaults_to_usd(movement_service, user_id, usd_account):
    movement = _expense(movement_service, user_id, usd_account, amount=2000)

    assert movement.currency == Currency.USD
    assert movement.amount_usd == 2000
    assert movement.amount == 1900000


def test_create_requires_user(movement_service, clp_account):
    with pytest.raises(AuthorizationError):
        _expense(movement_service, None, clp_account)


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount": 0},
        {"amount": -100},
        {"name": "   "},
        {"name": "x" * 201},
    ],
)
def test_create_rejects_invalid_input(movement_service, user_id, clp_account, overrides):
    with pytest.raises(ValidationError):
        _expense(movement_service, user_id, clp_account, **overrides)


def test_create_rejects_unknown_type(movement_service, user_id, clp_account):
    with pytest.raises(ValidationError):
        movement_service.create_movement(
            user_id=user_id, name="x", date=date(2025, 3, 5), amount=100, type="refund", account_id=clp_account.id
        )


def test_create_rejects_foreign_account(movement_service, user_id, other_account):
    with pytest.raises(NotFoundError) as excinfo:
        _expense(movement_service, user_id, other_account)
    assert str(excinfo.value) == f"Account {other_account.id} not found"


def test_create_rejects_foreign_category(movement_service, category_service, user_id, other_user_id, clp_account):
    foreign = category_service.create_category(other_user_id, name="Theirs", emoji="🙈")
    with pytest.raises(NotFoundError):
        _expense(movement_service, user_id, clp_account, category_id=foreign.id)


def test_create_fails_when_rate_unavailable(movement_service, user_id, clp_account, rate_source, temp_db):
    rate_source.fail = True
    with pytest.raises(ExchangeRateUnavailableError):
        _expense(movement_service, user_id, clp_account, currency="USD")
    assert temp_db.count_movements(user_id) == 0


def test_get_movement_hides_other_users_rows(movement_service, user_id, other_user_id, clp_account):
    movement = _expense(movement_service, user_id, clp_account)

    assert movement_service.get_movement(user_id, movement.id) == movement
    with pytest.raises(NotFoundError):
        movement_service.get_movement(other_user_id, movement.id)


def test_update_renames_and_keeps_original_name(movement_service, user_id, clp_account):
    movement = _expense(movement_service, user_id, clp_account, name="COMPRA 1234 LIDER")

    movement = movement_service.update_movement(user_id, movement.id, name="Groceries")
    assert movement.name == "Groceries"
    assert movement.original_name == "COMPRA 1234 LIDER"

    movement = movement_service.update_movement(user_id, movement.id, name="Lider")
    assert movement.original_name == "COMPRA 1234 LIDER"


def test_update_amount_renormalizes(movement_service, user_id, clp_account):
    movement = _expense(movement_service, user_id, clp_account, amount=1000, currency="USD")

    movement = movement_service.update_movement(user_id, movement.id, amount=2000)
    assert movement.amount_usd == 2000
    assert movement.amount == 1900000


def test_update_currency_back_to_local_clears_usd_slot(movement_service, user_id, clp_account):
    movement = _expense(movement_service, user_id, clp_account, amount=1000, currency="USD")

    movement = movement_service.update_movement(user_id, movement.id, amount=50000, currency="CLP")
    assert movement.currency == Currency.CLP
    assert movement.amount == 50000
    assert movement.amount_usd is None
    assert movement.exchange_rate is None


def test_update_moving_to_usd_account_renormalizes(movement_service, user_id, clp_account, usd_account):
    movement = _expense(movement_service, user_id, clp_account, amount=950000)

    movement = movement_service.update_movement(user_id, movement.id, account_id=usd_account.id)
    assert movement.account_id == usd_account.id
    assert movement.amount == 950000
    assert movement.amount_usd == 1000


def test_update_category_and_clear(movement_service, user_id, clp_account, food_category):
    movement = _expense(movement_service, user_id, clp_account)

    movement = movement_service.update_movement(user_id, movement.id, category_id=food_category.id)
    assert movement.category_id == food_category.id

    movement = movement_service.update_movement(user_id, movement.id, clear_category=True)
    assert movement.category_id is None


def test_update_rejects_cross_user_references(movement_service, user_id, clp_account, other_account):
    movement = _expense(movement_service, user_id, clp_account)

    with pytest.raises(NotFoundError):
        movement_service.update_movement(user_id, movement.id, account_id=other_account.id)
    assert movement_service.get_movement(user_id, movement.id).account_id == clp_account.id


def test_update_rejects_transfer_leg(movement_service, transfer_service, user_id, clp_account, usd_account):
    transfer = transfer_service.create_transfer(
        user_id, clp_account.id, usd_account.id, 950000, date(2025, 3, 5)
    )
    with pytest.raises(LinkageError):
        movement_service.update_movement(user_id, transfer.from_movement.id, amount=1)


def test_delete_movement(movement_service, user_id, clp_account):
    movement = _expense(movement_service, user_id, clp_account)
    movement_service.delete_movement(user_id, movement.id)

    with pytest.raises(NotFoundError):
        movement_service.get_movement(user_id, movement.id)


def test_delete_other_users_movement_fails(movement_service, user_id, other_user_id, clp_account):
    movement = _expense(movement_service, user_id, clp_account)
    with pytest.raises(NotFoundError):
        movement_service.delete_movement(other_user_id, movement.id)


def test_list_movements_newest_first_with_pagination(movement_service, user_id, clp_account):
    for day in range(1, 6):
        _expense(movement_service, user_id, clp_account, name=f"Day {day}", date=date(2025, 3, day))

    first = movement_service.list_movements(user_id, page=1, page_size=2)
    assert [m.name for m in first.items] == ["Day 5", "Day 4"]
    assert first.total == 5
    assert first.has_next is True

    last = movement_service.list_movements(user_id, page=3, page_size=2)
    assert [m.name for m in last.items] == ["Day 1"]
    assert last.has_next is False


def test_list_movements_filters(movement_service, user_id, clp_account, usd_account):
    _expense(movement_service, user_id, clp_account, date=date(2025, 3, 1))
    _expense(movement_service, user_id, clp_account, date=date(2025, 3, 10), needs_review=True)
    _expense(movement_service, user_id, usd_account, amount=500, date=date(2025, 3, 10))

    assert movement_service.list_movements(user_id, account_id=usd_account.id).total == 1
    assert movement_service.list_movements(user_id, needs_review=True).total == 1
    assert movement_service.list_movements(
        user_id, start_date=date(2025, 3, 5), end_date=date(2025, 3, 31)
    ).total == 2


def test_list_movements_rejects_bad_page(movement_service, user_id):
    with pytest.raises(ValidationError):
        movement_service.list_movements(user_id, page=0)


def test_review_queue(movement_service, user_id, clp_account, food_category):
    pending = _expense(movement_service, user_id, clp_account, needs_review=True)
    _expense(movement_service, user_id, clp_account)

    assert movement_service.pending_review_count(user_id) == 1
    assert [m.id for m in movement_service.list_pending_review(user_id)] == [pending.id]

    confirmed = movement_service.confirm_movement(
        user_id, pending.id, name="Lunch", category_id=food_category.id
    )
    assert confirmed.needs_review is False
    assert confirmed.name == "Lunch"
    assert confirmed.category_id == food_category.id
    assert movement_service.pending_review_count(user_id) == 0


def test_confirm_rejects_review_flag(movement_service, user_id, clp_account):
    pending = _expense(movement_service, user_id, clp_account, needs_review=True)

    with pytest.raises(ValidationError):
        movement_service.confirm_movement(user_id, pending.id, needs_review=True)

    assert movement_service.get_movement(user_id, pending.id).needs_review is True
