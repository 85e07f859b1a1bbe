"""Transaction domain service."""

import logging
from typing import Optional
from datetime import date
from decimal import Decimal

from budgetwise.database.base import Database
from budgetwise.domain.entities import Transaction as TransactionEntity, TransactionType
from budgetwise.domain.errors import (
    NotFoundError,
    ValidationError,
    account_not_found,
    non_positive_amount,
    transaction_not_found,
)

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Other"


def _validate_amount(amount: Decimal) -> Decimal:
    if amount <= 0:
        raise ValidationError(non_positive_amount(amount))
    return amount


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        account_id: int,
        type: TransactionType | str,
        amount: Decimal,
        date: date,
        description: str = "",
        category: str = DEFAULT_CATEGORY,
    ) -> int:
        """Create a transaction.

        Args:
            account_id: Account ID
            type: "income" or "expense"
            amount: Positive transaction amount
            date: Day the transaction happened
            description: Optional description
            category: Category name

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If account doesn't exist
            ValidationError: If amount is not positive or type is unknown
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        txn_type = self._parse_type(type)
        _validate_amount(amount)

        transaction_id = self.db.create_transaction(
            account_id=account_id,
            type=txn_type,
            amount=amount,
            date=date,
            description=description or "",
            category=category or DEFAULT_CATEGORY,
        )
        logger.info(
            "Created %s transaction %s of %s on account %s",
            txn_type.value,
            transaction_id,
            amount,
            account_id,
        )
        return transaction_id

    @staticmethod
    def _parse_type(value: TransactionType | str) -> TransactionType:
        try:
            return TransactionType(value)
        except ValueError:
            raise ValidationError(
                f"Unknown transaction type '{value}'. Use 'income' or 'expense'."
            )

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def update_transaction(
        self,
        transaction_id: int,
        account_id: Optional[int] = None,
        type: Optional[TransactionType | str] = None,
        amount: Optional[Decimal] = None,
        date: Optional[date] = None,
        description: Optional[str] = None,
        category: Optional[str] = None,
    ) -> None:
        """Update transaction fields.

        Only the fields that are not None are changed.

        Raises:
            NotFoundError: If transaction or account doesn't exist
            ValidationError: If amount is not positive or type is unknown
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        if account_id is not None and self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))

        txn_type = self._parse_type(type) if type is not None else None
        if amount is not None:
            _validate_amount(amount)

        self.db.update_transaction(
            transaction_id=transaction_id,
            account_id=account_id,
            type=txn_type,
            amount=amount,
            date=date,
            description=description,
            category=category,
        )
        logger.info("Updated transaction %s", transaction_id)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        self.db.delete_transaction(transaction_id)
        logger.info("Deleted transaction %s", transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
        type: Optional[TransactionType | str] = None,
        category: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters, newest first.

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            account_id: Optional account ID filter
            type: Optional transaction type filter
            category: Optional category name filter
            limit: Optional maximum number of transactions

        Returns:
            List of transaction entities
        """
        txn_type = self._parse_type(type) if type is not None else None
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            account_id=account_id,
            type=txn_type,
            category=category,
            limit=limit,
        )

    def recent_transactions(self, limit: int = 5) -> list[TransactionEntity]:
        """Return the most recent transactions across all accounts."""
        return self.db.list_transactions(limit=limit)
