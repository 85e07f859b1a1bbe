"""Domain model entities for budgetwise.

These are pure data classes representing business concepts, independent of
database schema. The balance engine only ever sees these entities, so it
stays usable with any store that can produce them.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Callable, Optional


class TransactionType(str, Enum):
    """Direction of a transaction. Amounts are stored positive."""

    INCOME = "income"
    EXPENSE = "expense"


class CategoryType(str, Enum):
    """Kind of transactions a category is meant for."""

    INCOME = "income"
    EXPENSE = "expense"
    GENERAL = "general"


@dataclass(frozen=True)
class Account:
    """Bank account domain entity."""

    id: int
    name: str
    initial_balance: Decimal
    balance_start_date: date
    created_at: datetime
    color: Optional[str] = None
    icon_url: Optional[str] = None


@dataclass(frozen=True)
class Category:
    """Category domain entity.

    Transactions reference categories by name, not by ID.
    """

    id: int
    name: str
    type: CategoryType
    icon: str
    created_at: datetime
    color: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    account_id: int
    type: TransactionType
    amount: Decimal
    description: str
    category: str
    date: date
    created_at: datetime

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the transaction type."""
        if self.type == TransactionType.INCOME:
            return self.amount
        return -self.amount


@dataclass(frozen=True)
class BalanceSnapshot:
    """User-asserted balance of one account at the end of one day."""

    id: int
    account_id: int
    date: date
    balance: Decimal


@dataclass(frozen=True)
class ChartTimeSettings:
    """Bucketing policy for a balance chart."""

    start_date: date
    step: Callable[[date], date]
    label: Callable[[date], str]
    granularity: str


@dataclass(frozen=True)
class SeriesStyle:
    """Display label and color of one chart series."""

    label: str
    color: str


@dataclass(frozen=True)
class GroupingResult:
    """Major/minor split of accounts for a multi-line balance chart."""

    major_accounts: tuple[Account, ...]
    minor_accounts: tuple[Account, ...]
    grouping_active: bool
    series_config: dict[str, SeriesStyle]
    current_balances: dict[int, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class ChartPoint:
    """One bucket of a balance chart."""

    date: date
    label: str
    values: dict[str, Decimal]


@dataclass(frozen=True)
class ChartSeries:
    """Chart-ready balance series and the configuration to render it."""

    data_points: tuple[ChartPoint, ...]
    series_config: dict[str, SeriesStyle]


@dataclass(frozen=True)
class SnapshotImportRow:
    """A single balance to write during a snapshot import."""

    date: date
    balance: Decimal
    existing_snapshot_id: Optional[int] = None


@dataclass(frozen=True)
class SnapshotImportPreview:
    """Outcome of comparing imported balances against stored snapshots."""

    account_id: int
    account_name: str
    total_rows: int
    new_count: int
    overwritten_count: int
    months: tuple[str, ...]
    rows: tuple[SnapshotImportRow, ...]


@dataclass(frozen=True)
class MonthlySummary:
    """Dashboard totals for the current calendar month."""

    monthly_income: Decimal
    monthly_expense: Decimal
    total_balance: Decimal


@dataclass(frozen=True)
class PeriodBar:
    """Income/expense totals for one bar of the transactions chart."""

    label: str
    income: Decimal
    expense: Decimal
    previous_income: Optional[Decimal] = None
    previous_expense: Optional[Decimal] = None


@dataclass(frozen=True)
class PeriodSummary:
    """Income/expense totals of a period compared with the previous one."""

    timeframe: str
    total_income: Decimal
    total_expense: Decimal
    income_change: float
    expense_change: float
    bars: tuple[PeriodBar, ...] = ()
