"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from budgetwise.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks BUDGETWISE_DB_PATH
            environment variable, then defaults to ~/.budgetwise/budgetwise.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("BUDGETWISE_DB_PATH")

    if database_path is None:
        # Default to ~/.budgetwise/budgetwise.db
        home = Path.home()
        db_dir = home / ".budgetwise"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "budgetwise.db")

    logger.debug("Opening SQLite database at %s", database_path)
    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
