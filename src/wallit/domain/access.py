"""Caller and ownership checks shared by the ledger services.

Missing rows and rows owned by another user produce the same NotFoundError so
that callers cannot probe for ids that belong to someone else.
"""

from typing import Optional

from wallit.database.base import Database
from wallit.domain.entities import Account, Category, Movement
from wallit.domain.errors import (
    AuthorizationError,
    NotFoundError,
    account_not_found,
    category_not_found,
    movement_not_found,
)


def require_user(user_id: Optional[str]) -> str:
    """Return user_id, or raise AuthorizationError when there is no caller."""
    if not user_id:
        raise AuthorizationError("Not authenticated")
    return user_id


def owned_account(db: Database, account_id: str, user_id: str) -> Account:
    account = db.get_account(account_id, user_id)
    if account is None:
        raise NotFoundError(account_not_found(account_id))
    return account


def owned_category(db: Database, category_id: str, user_id: str) -> Category:
    category = db.get_category(category_id, user_id)
    if category is None:
        raise NotFoundError(category_not_found(category_id))
    return category


def owned_movement(db: Database, movement_id: str, user_id: str) -> Movement:
    movement = db.get_movement(movement_id, user_id)
    if movement is None:
        raise NotFoundError(movement_not_found(movement_id))
    return movement
