"""Report domain service."""

from datetime import date
from typing import Optional

from wallit.database.base import Database
from wallit.domain.access import owned_account, owned_category, require_user
from wallit.domain.entities import ReportData
from wallit.domain.errors import ValidationError


class ReportService:
    """Read-only income/expense projections over a date range."""

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_report(
        self,
        user_id: str,
        start_date: date,
        end_date: date,
        category_id: Optional[str] = None,
        account_id: Optional[str] = None,
    ) -> ReportData:
        """Aggregate movements between two dates (inclusive).

        Amounts are the stored local-currency slot. Receivables and the
        payments that settle them are left out so that lending money is
        neither spending nor earning.

        Args:
            user_id: Current user
            start_date: First day of the period
            end_date: Last day of the period
            category_id: Only movements of this category
            account_id: Only movements of this account

        Returns:
            ReportData with daily totals, period totals and category spending

        Raises:
            ValidationError: If end_date is before start_date
            NotFoundError: If a filter references something the user does not own
        """
        user_id = require_user(user_id)
        if end_date < start_date:
            raise ValidationError("End date must not be before start date")
        if category_id is not None:
            owned_category(self.db, category_id, user_id)
        if account_id is not None:
            owned_account(self.db, account_id, user_id)

        daily = self.db.get_daily_totals(user_id, start_date, end_date, category_id, account_id)
        spending = self.db.get_category_spending(user_id, start_date, end_date, category_id, account_id)

        return ReportData(
            start_date=start_date,
            end_date=end_date,
            total_income=sum(d.income for d in daily),
            total_expense=sum(d.expense for d in daily),
            movement_count=sum(d.count for d in daily),
            daily=tuple(daily),
            category_spending=tuple(spending),
        )
