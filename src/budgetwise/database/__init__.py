"""Database layer for budgetwise application."""

from budgetwise.database.base import Database
from budgetwise.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
