"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime, UTC
from decimal import Decimal

from budgetwise.database.mappers import account_to_domain, snapshot_to_domain
from budgetwise.database.models import Account as ORMAccount, BalanceSnapshot as ORMBalanceSnapshot
from budgetwise.domain import entities
from budgetwise.domain.entities import CategoryType, SnapshotImportRow, TransactionType
from budgetwise.domain.errors import NotFoundError


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db):
        account_id = temp_db.create_account(
            name="Checking",
            initial_balance=Decimal("10.50"),
            balance_start_date=date(2024, 1, 1),
            color="#123456",
        )

        account = temp_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.name == "Checking"
        assert account.initial_balance == Decimal("10.50")
        assert account.balance_start_date == date(2024, 1, 1)
        assert account.color == "#123456"
        assert account.icon_url is None
        assert isinstance(account.created_at, datetime)

    def test_list_accounts_ordered_by_name(self, temp_db):
        temp_db.create_account(name="Savings", initial_balance=Decimal("0"), balance_start_date=date(2024, 1, 1))
        temp_db.create_account(name="Checking", initial_balance=Decimal("0"), balance_start_date=date(2024, 1, 1))

        assert [a.name for a in temp_db.list_accounts()] == ["Checking", "Savings"]

    def test_transaction_round_trip(self, temp_db, sample_account):
        txn_id = temp_db.create_transaction(
            account_id=sample_account.id,
            type=TransactionType.INCOME,
            amount=Decimal("99.99"),
            date=date(2024, 1, 15),
            description="Refund",
            category="Shopping",
        )

        txn = temp_db.get_transaction(txn_id)

        assert isinstance(txn, entities.Transaction)
        assert txn.type == TransactionType.INCOME
        assert txn.amount == Decimal("99.99")
        assert isinstance(txn.amount, Decimal)
        assert txn.date == date(2024, 1, 15)

    def test_find_snapshot(self, temp_db, sample_account):
        snapshot_id = temp_db.create_snapshot(sample_account.id, date(2024, 1, 10), Decimal("5"))

        found = temp_db.find_snapshot(sample_account.id, date(2024, 1, 10))

        assert isinstance(found, entities.BalanceSnapshot)
        assert found.id == snapshot_id
        assert temp_db.find_snapshot(sample_account.id, date(2024, 1, 11)) is None

    def test_upsert_snapshots(self, temp_db, sample_account):
        existing_id = temp_db.create_snapshot(sample_account.id, date(2024, 1, 10), Decimal("5"))

        written = temp_db.upsert_snapshots(
            sample_account.id,
            [
                SnapshotImportRow(date(2024, 1, 10), Decimal("6"), existing_snapshot_id=existing_id),
                SnapshotImportRow(date(2024, 1, 11), Decimal("7")),
            ],
        )

        assert written == 2
        assert temp_db.get_snapshot(existing_id).balance == Decimal("6")
        assert temp_db.get_account_snapshot_count(sample_account.id) == 2

    def test_upsert_snapshots_rolls_back_on_missing_row(self, temp_db, sample_account):
        with pytest.raises(NotFoundError):
            temp_db.upsert_snapshots(
                sample_account.id,
                [
                    SnapshotImportRow(date(2024, 1, 11), Decimal("7")),
                    SnapshotImportRow(date(2024, 1, 12), Decimal("8"), existing_snapshot_id=999),
                ],
            )

        assert temp_db.list_snapshots(sample_account.id) == []

    def test_category_filters(self, temp_db):
        temp_db.create_category(name="Salary", type=CategoryType.INCOME, icon="Briefcase")
        temp_db.create_category(name="Rent", type=CategoryType.EXPENSE, icon="Home")

        income = temp_db.list_categories(type=CategoryType.INCOME)

        assert [c.name for c in income] == ["Salary"]
        assert isinstance(income[0], entities.Category)
        assert temp_db.find_category("Rent", CategoryType.INCOME) is None
        assert temp_db.find_category("Rent").type == CategoryType.EXPENSE

    def test_missing_rows_raise_not_found(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.update_account(404, name="x")
        with pytest.raises(NotFoundError):
            temp_db.delete_snapshot(404)
        with pytest.raises(NotFoundError):
            temp_db.delete_category(404, fallback_name="Other")


class TestMappers:
    def test_account_to_domain(self):
        created = datetime.now(UTC)
        orm_account = ORMAccount(
            id=1,
            name="Checking",
            initial_balance=Decimal("12.00"),
            balance_start_date=date(2024, 1, 1),
            created_at=created,
        )

        account = account_to_domain(orm_account)

        assert isinstance(account, entities.Account)
        assert account.initial_balance == Decimal("12.00")
        assert account.created_at == created
        assert account.color is None

    def test_snapshot_to_domain(self):
        orm_snapshot = ORMBalanceSnapshot(
            id=3, account_id=1, date=date(2024, 2, 1), balance=Decimal("-4.20")
        )

        snapshot = snapshot_to_domain(orm_snapshot)

        assert snapshot == entities.BalanceSnapshot(
            id=3, account_id=1, date=date(2024, 2, 1), balance=Decimal("-4.20")
        )
