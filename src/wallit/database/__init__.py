"""Database layer for wallit application."""

from wallit.database.base import Database
from wallit.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
