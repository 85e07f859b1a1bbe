"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the balance engine never sees
ORM instances.
"""

from decimal import Decimal

from budgetwise.domain import entities as domain
from budgetwise.database.models import (
    Account as ORMAccount,
    BalanceSnapshot as ORMBalanceSnapshot,
    Category as ORMCategory,
    Transaction as ORMTransaction,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        initial_balance=Decimal(orm_account.initial_balance),
        balance_start_date=orm_account.balance_start_date,
        created_at=orm_account.created_at,
        color=orm_account.color,
        icon_url=orm_account.icon_url,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        type=domain.TransactionType(orm_transaction.type),
        amount=Decimal(orm_transaction.amount),
        description=orm_transaction.description or "",
        category=orm_transaction.category,
        date=orm_transaction.date,
        created_at=orm_transaction.created_at,
    )


def snapshot_to_domain(orm_snapshot: ORMBalanceSnapshot) -> domain.BalanceSnapshot:
    """Convert SQLAlchemy BalanceSnapshot model to domain BalanceSnapshot entity."""
    return domain.BalanceSnapshot(
        id=orm_snapshot.id,
        account_id=orm_snapshot.account_id,
        date=orm_snapshot.date,
        balance=Decimal(orm_snapshot.balance),
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        type=domain.CategoryType(orm_category.type),
        icon=orm_category.icon,
        created_at=orm_category.created_at,
        color=orm_category.color,
    )
