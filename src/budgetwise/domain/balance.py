"""Balance snapshot domain service.

Snapshots are the user's trusted checkpoints. This service keeps at most one
per (account, day) and feeds freshly fetched collections to the pure
functions in ``budgetwise.domain.balance_calculations``.
"""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from budgetwise.database.base import Database
from budgetwise.domain import balance_calculations as calc
from budgetwise.domain.entities import (
    BalanceSnapshot,
    ChartSeries,
    GroupingResult,
    SnapshotImportPreview,
    SnapshotImportRow,
)
from budgetwise.domain.errors import (
    ConflictError,
    NotFoundError,
    account_not_found,
    duplicate_snapshot_day,
    snapshot_not_found,
)

logger = logging.getLogger(__name__)


class BalanceService:
    """Service for balance snapshots and reconstructed balances."""

    def __init__(self, db: Database):
        """Initialize balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_account(self, account_id: int):
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _require_snapshot(self, snapshot_id: int) -> BalanceSnapshot:
        snapshot = self.db.get_snapshot(snapshot_id)
        if snapshot is None:
            raise NotFoundError(snapshot_not_found(snapshot_id))
        return snapshot

    # Snapshot management

    def set_balance(
        self, account_id: int, day: date | datetime, balance: Decimal
    ) -> tuple[int, bool]:
        """Record the known balance of an account on a day.

        An existing snapshot for the same day is overwritten instead of
        adding a second one.

        Returns:
            Tuple of (snapshot ID, True if a new snapshot was created)

        Raises:
            NotFoundError: If account doesn't exist
        """
        self._require_account(account_id)
        day = calc.to_day(day)

        existing = self.db.find_snapshot(account_id, day)
        if existing is None:
            snapshot_id = self.db.create_snapshot(account_id=account_id, date=day, balance=balance)
            logger.info("Created snapshot %s for account %s on %s", snapshot_id, account_id, day)
            return snapshot_id, True

        self.db.update_snapshot(existing.id, balance=balance)
        logger.info("Overwrote snapshot %s for account %s on %s", existing.id, account_id, day)
        return existing.id, False

    def update_snapshot(
        self,
        snapshot_id: int,
        day: Optional[date | datetime] = None,
        balance: Optional[Decimal] = None,
    ) -> None:
        """Change the day or balance of a snapshot.

        Raises:
            NotFoundError: If snapshot doesn't exist
            ConflictError: If the account already has a snapshot on the new day
        """
        snapshot = self._require_snapshot(snapshot_id)
        if day is not None:
            day = calc.to_day(day)
            other = self.db.find_snapshot(snapshot.account_id, day)
            if other is not None and other.id != snapshot_id:
                raise ConflictError(duplicate_snapshot_day(snapshot.account_id, day))

        self.db.update_snapshot(snapshot_id, date=day, balance=balance)
        logger.info("Updated snapshot %s", snapshot_id)

    def delete_snapshot(self, snapshot_id: int) -> None:
        """Delete a snapshot.

        Raises:
            NotFoundError: If snapshot doesn't exist
        """
        self._require_snapshot(snapshot_id)
        self.db.delete_snapshot(snapshot_id)
        logger.info("Deleted snapshot %s", snapshot_id)

    def get_snapshot(self, snapshot_id: int) -> Optional[BalanceSnapshot]:
        """Get snapshot by ID."""
        return self.db.get_snapshot(snapshot_id)

    def list_snapshots(self, account_id: Optional[int] = None) -> list[BalanceSnapshot]:
        """List snapshots, newest first, optionally for one account."""
        if account_id is not None:
            self._require_account(account_id)
        return self.db.list_snapshots(account_id=account_id)

    def preview_snapshot_import(
        self, account_id: int, rows: Iterable[tuple[date | datetime, Decimal]]
    ) -> SnapshotImportPreview:
        """Compare already-parsed (day, balance) rows against stored snapshots.

        Rows are normalized to days and sorted chronologically. Several rows
        for the same day collapse to the last one, so the preview counts
        match what ``import_snapshots`` writes. Each remaining row either
        creates a new snapshot or overwrites the one stored for that day.

        Raises:
            NotFoundError: If account doesn't exist
        """
        account = self._require_account(account_id)
        existing = {s.date: s.id for s in self.db.list_snapshots(account_id=account_id)}

        by_day: dict[date, Decimal] = {}
        for day, balance in rows:
            by_day[calc.to_day(day)] = Decimal(balance)

        import_rows: list[SnapshotImportRow] = []
        months: list[str] = []
        new_count = 0
        overwritten_count = 0
        for day in sorted(by_day):
            existing_id = existing.get(day)
            if existing_id is None:
                new_count += 1
            else:
                overwritten_count += 1
            import_rows.append(
                SnapshotImportRow(date=day, balance=by_day[day], existing_snapshot_id=existing_id)
            )
            month = day.strftime("%B %Y")
            if month not in months:
                months.append(month)

        return SnapshotImportPreview(
            account_id=account.id,
            account_name=account.name,
            total_rows=len(import_rows),
            new_count=new_count,
            overwritten_count=overwritten_count,
            months=tuple(months),
            rows=tuple(import_rows),
        )

    def import_snapshots(self, preview: SnapshotImportPreview) -> int:
        """Write a previewed import in a single batch.

        Returns:
            Number of snapshots written
        """
        self._require_account(preview.account_id)
        written = self.db.upsert_snapshots(preview.account_id, list(preview.rows))
        logger.info(
            "Imported %d snapshots for account %s (%d new, %d overwritten)",
            written,
            preview.account_id,
            preview.new_count,
            preview.overwritten_count,
        )
        return written

    # Reconstructed balances

    def _collections(self):
        accounts = self.db.list_accounts()
        transactions = self.db.list_transactions()
        snapshots = self.db.list_snapshots()
        logger.debug(
            "Loaded %d accounts, %d transactions, %d snapshots",
            len(accounts),
            len(transactions),
            len(snapshots),
        )
        return accounts, transactions, snapshots

    def balance_on_date(self, account_id: int, day: date | datetime) -> Decimal:
        """Reconstructed balance of one account at the end of a day."""
        account = self._require_account(account_id)
        transactions = self.db.list_transactions(account_id=account_id)
        snapshots = self.db.list_snapshots(account_id=account_id)
        return calc.balance_on_date(account, day, transactions, snapshots)

    def current_balance(self, account_id: int, today: Optional[date] = None) -> Decimal:
        """Reconstructed balance of one account today."""
        return self.balance_on_date(account_id, today or date.today())

    def total_current_balance(self, today: Optional[date] = None) -> Decimal:
        """Sum of all accounts' reconstructed balances today."""
        accounts, transactions, snapshots = self._collections()
        return calc.total_current_balance(accounts, transactions, snapshots, today=today)

    def compute_grouping(self, today: Optional[date] = None) -> GroupingResult:
        """Major/minor account split for the balance chart."""
        accounts, transactions, snapshots = self._collections()
        return calc.compute_grouping(accounts, transactions, snapshots, today=today)

    def build_chart_series(
        self, exploded: bool = False, today: Optional[date] = None
    ) -> ChartSeries:
        """Multi-account balance chart, grouped from the same fetched data."""
        accounts, transactions, snapshots = self._collections()
        grouping = calc.compute_grouping(accounts, transactions, snapshots, today=today)
        return calc.build_chart_series(
            accounts, transactions, snapshots, grouping, exploded=exploded, today=today
        )

    def build_account_series(self, account_id: int, today: Optional[date] = None) -> ChartSeries:
        """Balance chart of a single account."""
        account = self._require_account(account_id)
        transactions = self.db.list_transactions(account_id=account_id)
        snapshots = self.db.list_snapshots(account_id=account_id)
        return calc.build_account_series(account, transactions, snapshots, today=today)
