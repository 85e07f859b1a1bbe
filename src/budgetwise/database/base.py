"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from budgetwise.domain.entities import (
    Account,
    BalanceSnapshot,
    Category,
    CategoryType,
    SnapshotImportRow,
    Transaction,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for budgetwise."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        initial_balance: Decimal,
        balance_start_date: date,
        color: Optional[str] = None,
        icon_url: Optional[str] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, name: str) -> Optional[Account]:
        """Get account by exact name."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts ordered by name."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None,
        icon_url: Optional[str] = None,
        clear_color: bool = False,
        clear_icon: bool = False,
    ) -> None:
        """Update the editable account fields (name, color, icon)."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> tuple[int, int]:
        """Delete an account after its transactions and snapshots.

        Returns:
            Tuple of (transactions deleted, snapshots deleted)
        """
        pass

    @abstractmethod
    def get_account_transaction_count(self, account_id: int) -> int:
        """Get count of transactions associated with an account."""
        pass

    @abstractmethod
    def get_account_snapshot_count(self, account_id: int) -> int:
        """Get count of balance snapshots associated with an account."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        account_id: int,
        type: TransactionType,
        amount: Decimal,
        date: date,
        description: str,
        category: str,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        account_id: Optional[int] = None,
        type: Optional[TransactionType] = None,
        amount: Optional[Decimal] = None,
        date: Optional[date] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
    ) -> None:
        """Update transaction fields that are not None."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first."""
        pass

    # Balance snapshot operations
    @abstractmethod
    def create_snapshot(self, account_id: int, date: date, balance: Decimal) -> int:
        """Create a balance snapshot. Returns snapshot ID."""
        pass

    @abstractmethod
    def get_snapshot(self, snapshot_id: int) -> Optional[BalanceSnapshot]:
        """Get balance snapshot by ID."""
        pass

    @abstractmethod
    def find_snapshot(self, account_id: int, date: date) -> Optional[BalanceSnapshot]:
        """Get the snapshot of an account for a given day, if any."""
        pass

    @abstractmethod
    def update_snapshot(
        self, snapshot_id: int, date: Optional[date] = None, balance: Optional[Decimal] = None
    ) -> None:
        """Update snapshot fields that are not None."""
        pass

    @abstractmethod
    def delete_snapshot(self, snapshot_id: int) -> None:
        """Delete a balance snapshot."""
        pass

    @abstractmethod
    def list_snapshots(self, account_id: Optional[int] = None) -> list[BalanceSnapshot]:
        """List balance snapshots, newest first, optionally for one account."""
        pass

    @abstractmethod
    def upsert_snapshots(self, account_id: int, rows: Sequence[SnapshotImportRow]) -> int:
        """Write many snapshots in one commit.

        Rows with an existing_snapshot_id overwrite that snapshot, the others
        are inserted. Returns the number of rows written.
        """
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self, name: str, type: CategoryType, icon: str, color: Optional[str] = None
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def find_category(self, name: str, type: Optional[CategoryType] = None) -> Optional[Category]:
        """Get a category by name, optionally restricted to a type."""
        pass

    @abstractmethod
    def list_categories(self, type: Optional[CategoryType] = None) -> list[Category]:
        """List categories ordered by name, optionally filtered by type."""
        pass

    @abstractmethod
    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        type: Optional[CategoryType] = None,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> int:
        """Update a category and rename it on its transactions.

        Returns:
            Number of transactions whose category name was rewritten
        """
        pass

    @abstractmethod
    def delete_category(self, category_id: int, fallback_name: str) -> int:
        """Delete a category, moving its transactions to fallback_name.

        Returns:
            Number of transactions moved to the fallback category
        """
        pass
