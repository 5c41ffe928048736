"""Category domain service."""

from wallit.database.base import Database
from wallit.domain.access import owned_category, require_user
from wallit.domain.entities import Category
from wallit.domain.errors import ValidationError
from wallit.utils.ids import generate_id


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(self, user_id: str, name: str, emoji: str) -> Category:
        """Create a category.

        Args:
            user_id: Current user
            name: Category name
            emoji: Emoji shown next to the name

        Returns:
            The created category

        Raises:
            ValidationError: If name or emoji is empty
        """
        user_id = require_user(user_id)
        name = (name or "").strip()
        emoji = (emoji or "").strip()
        if not name:
            raise ValidationError("Name is required")
        if not emoji:
            raise ValidationError("Emoji is required")

        category_id = self.db.create_category(
            category_id=generate_id(), user_id=user_id, name=name, emoji=emoji
        )
        return owned_category(self.db, category_id, user_id)

    def get_category(self, user_id: str, category_id: str) -> Category:
        user_id = require_user(user_id)
        return owned_category(self.db, category_id, user_id)

    def list_categories(self, user_id: str) -> list[Category]:
        user_id = require_user(user_id)
        return self.db.list_categories(user_id)

    def delete_category(self, user_id: str, category_id: str) -> None:
        """Delete a category. Movements that used it become uncategorized."""
        user_id = require_user(user_id)
        category = owned_category(self.db, category_id, user_id)
        self.db.delete_category(category.id)
