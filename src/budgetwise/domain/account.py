"""Account domain service."""

import logging
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Optional

from budgetwise.database.base import Database
from budgetwise.domain.entities import Account as AccountEntity
from budgetwise.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account_name,
)

logger = logging.getLogger(__name__)


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def _validate_name(self, name: str, account_id: Optional[int] = None) -> str:
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        existing = self.db.get_account_by_name(name)
        if existing is not None and existing.id != account_id:
            raise ConflictError(duplicate_account_name(name))
        return name

    def create_account(
        self,
        name: str,
        initial_balance: Decimal = Decimal("0"),
        balance_start_date: Optional[date] = None,
        color: Optional[str] = None,
        icon_url: Optional[str] = None,
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            initial_balance: Balance the account was opened with
            balance_start_date: Day balance tracking starts (defaults to today)
            color: Optional chart color
            icon_url: Optional icon URL

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If account name already exists
        """
        name = self._validate_name(name)
        if balance_start_date is None:
            # Same UTC clock as the stored created_at
            balance_start_date = datetime.now(UTC).date()

        account_id = self.db.create_account(
            name=name,
            initial_balance=initial_balance,
            balance_start_date=balance_start_date,
            color=color,
            icon_url=icon_url,
        )
        logger.info("Created account %s (%r)", account_id, name)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise NotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        color: Optional[str] = None,
        icon_url: Optional[str] = None,
        clear_color: bool = False,
        clear_icon: bool = False,
    ) -> None:
        """Edit an account's name, color or icon.

        Balances are not editable here; they are changed through snapshots.

        Raises:
            NotFoundError: If account not found
            ConflictError: If the new name is taken by another account
        """
        self.require_account(account_id)
        if name is not None:
            name = self._validate_name(name, account_id=account_id)

        self.db.update_account(
            account_id=account_id,
            name=name,
            color=color,
            icon_url=icon_url,
            clear_color=clear_color,
            clear_icon=clear_icon,
        )
        logger.info("Updated account %s", account_id)

    def delete_account(self, account_id: int) -> tuple[int, int]:
        """Delete an account with all its transactions and balance snapshots.

        Args:
            account_id: Account ID to delete

        Returns:
            Tuple of (transactions deleted, snapshots deleted)

        Raises:
            NotFoundError: If account not found
        """
        self.require_account(account_id)
        transaction_count, snapshot_count = self.db.delete_account(account_id)
        logger.info(
            "Deleted account %s with %d transactions and %d snapshots",
            account_id,
            transaction_count,
            snapshot_count,
        )
        return transaction_count, snapshot_count
