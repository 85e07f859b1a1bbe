"""Shared pytest fixtures for budgetwise tests."""

import os
import tempfile
from datetime import date, datetime
from decimal import Decimal

import pytest

from budgetwise.database.factories import create_sqlite_database
from budgetwise.domain.account import AccountService
from budgetwise.domain.balance import BalanceService
from budgetwise.domain.category import CategoryService
from budgetwise.domain.entities import (
    Account,
    BalanceSnapshot,
    Transaction,
    TransactionType,
)
from budgetwise.domain.summary import SummaryService
from budgetwise.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def balance_service(temp_db):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    account_id = account_service.create_account(
        name="Test Account", balance_start_date=date(2024, 1, 1)
    )
    return account_service.get_account(account_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


# In-memory entity builders for the pure balance functions


def make_account(account_id, name=None, color=None, start=date(2024, 1, 1)):
    return Account(
        id=account_id,
        name=name or f"Account {account_id}",
        initial_balance=Decimal("0"),
        balance_start_date=start,
        created_at=datetime(start.year, start.month, start.day, 9, 0),
        color=color,
    )


def make_snapshot(snapshot_id, account_id, day, balance):
    return BalanceSnapshot(
        id=snapshot_id, account_id=account_id, date=day, balance=Decimal(str(balance))
    )


def make_transaction(txn_id, account_id, day, amount, type=TransactionType.EXPENSE, category="Other"):
    return Transaction(
        id=txn_id,
        account_id=account_id,
        type=type,
        amount=Decimal(str(amount)),
        description="",
        category=category,
        date=day,
        created_at=datetime(day.year, day.month, day.day, 12, 0),
    )
