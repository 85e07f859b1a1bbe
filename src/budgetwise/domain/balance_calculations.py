"""Balance reconstruction and chart series generation.

Balances are reconstructed from sparse, user-asserted snapshots plus the
transaction ledger. Every function here is pure: callers pass collections
they already fetched and get freshly built results back. Nothing is cached,
so recomputing after a data change is just calling the function again.
"""

from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Iterator, Optional, Sequence

from dateutil.relativedelta import relativedelta

from budgetwise.domain.entities import (
    Account,
    BalanceSnapshot,
    ChartPoint,
    ChartSeries,
    ChartTimeSettings,
    GroupingResult,
    SeriesStyle,
    Transaction,
)

GROUPING_THRESHOLD = Decimal("0.02")
MIN_ACCOUNTS_FOR_GROUPING = 3

TOTAL_SERIES = "Total Balance"
OTHERS_SERIES = "Others"

ACCOUNT_COLORS = (
    "hsl(var(--chart-1))",
    "hsl(var(--chart-2))",
    "hsl(var(--chart-3))",
    "hsl(var(--chart-4))",
    "hsl(var(--chart-5))",
)
TOTAL_COLOR = "hsl(var(--primary))"
OTHERS_COLOR = "hsl(var(--muted-foreground))"

_CENT = Decimal("0.01")
_ZERO = Decimal("0")


def to_day(value: date | datetime) -> date:
    """Normalize a date or datetime to its calendar day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def round_money(value: Decimal) -> Decimal:
    """Round a money amount to cents for presentation."""
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def _daily_label(d: date) -> str:
    return f"{d.day} {d.strftime('%b')}"


def _monthly_label(d: date) -> str:
    return d.strftime("%b %y")


def _quarterly_label(d: date) -> str:
    return f"Q{(d.month - 1) // 3 + 1} '{d.strftime('%y')}"


def _yearly_label(d: date) -> str:
    return d.strftime("%Y")


def get_chart_time_settings(oldest: date | datetime, newest: date | datetime) -> ChartTimeSettings:
    """Pick bucket size, first bucket and label format for a date range.

    Short ranges are shown day by day with at least 30 buckets; longer ranges
    switch to months, quarters and finally years so the number of buckets
    stays readable.

    Args:
        oldest: Earliest date that must be visible
        newest: Last date of the chart (usually today)

    Returns:
        ChartTimeSettings with start date, step function and label function
    """
    oldest = to_day(oldest)
    newest = to_day(newest)
    span = (newest - oldest).days

    if span <= 60:
        return ChartTimeSettings(
            start_date=newest - timedelta(days=max(span, 29)),
            step=lambda d: d + timedelta(days=1),
            label=_daily_label,
            granularity="daily",
        )
    if span <= 365 * 1.5:
        return ChartTimeSettings(
            start_date=oldest.replace(day=1),
            step=lambda d: d + relativedelta(months=1),
            label=_monthly_label,
            granularity="monthly",
        )
    if span <= 365 * 3:
        quarter_month = 3 * ((oldest.month - 1) // 3) + 1
        return ChartTimeSettings(
            start_date=date(oldest.year, quarter_month, 1),
            step=lambda d: d + relativedelta(months=3),
            label=_quarterly_label,
            granularity="quarterly",
        )
    return ChartTimeSettings(
        start_date=date(oldest.year, 1, 1),
        step=lambda d: d + relativedelta(years=1),
        label=_yearly_label,
        granularity="yearly",
    )


def iter_bucket_dates(settings: ChartTimeSettings, newest: date | datetime) -> Iterator[date]:
    """Yield bucket dates from the settings' start up to and including newest."""
    newest = to_day(newest)
    current = settings.start_date
    while current <= newest:
        yield current
        current = settings.step(current)


def balance_on_date(
    account: Account,
    target: date | datetime,
    transactions: Iterable[Transaction],
    snapshots: Iterable[BalanceSnapshot],
) -> Decimal:
    """Reconstruct the balance of one account at the end of a day.

    The most recent snapshot on or before the target day is the starting
    point; transactions strictly after the snapshot day and up to the target
    day are replayed on top of it. Without such a snapshot the balance is 0,
    not the account's initial balance.

    Args:
        account: Account to reconstruct
        target: Day to reconstruct the balance for
        transactions: Transactions of any accounts; filtered to this account
        snapshots: Snapshots of any accounts; filtered to this account

    Returns:
        Reconstructed balance
    """
    target = to_day(target)

    reference: Optional[BalanceSnapshot] = None
    reference_day: Optional[date] = None
    for snapshot in snapshots:
        if snapshot.account_id != account.id:
            continue
        snapshot_day = to_day(snapshot.date)
        if snapshot_day > target:
            continue
        if reference_day is None or snapshot_day > reference_day:
            reference = snapshot
            reference_day = snapshot_day

    if reference is None:
        return _ZERO

    change = sum(
        (
            txn.signed_amount
            for txn in transactions
            if txn.account_id == account.id and reference_day < to_day(txn.date) <= target
        ),
        _ZERO,
    )
    return reference.balance + change


def total_current_balance(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    snapshots: Sequence[BalanceSnapshot],
    today: Optional[date] = None,
) -> Decimal:
    """Sum of every account's reconstructed balance today."""
    today = to_day(today or date.today())
    return sum(
        (balance_on_date(acc, today, transactions, snapshots) for acc in accounts),
        _ZERO,
    )


def _account_color(account: Account, index: int) -> str:
    return account.color or ACCOUNT_COLORS[index % len(ACCOUNT_COLORS)]


def compute_grouping(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    snapshots: Sequence[BalanceSnapshot],
    today: Optional[date] = None,
) -> GroupingResult:
    """Split accounts into major ones and minor ones collapsed into "Others".

    An account is minor when the magnitude of its current balance is below
    2% of the summed magnitudes of all current balances. Grouping needs at
    least three accounts and only activates when two or more accounts are
    minor; a lone minor account is left as is.

    Returns:
        GroupingResult with both account lists, the activation flag, the
        series configuration and each account's current balance
    """
    if not accounts:
        return GroupingResult(
            major_accounts=(),
            minor_accounts=(),
            grouping_active=False,
            series_config={},
        )

    today = to_day(today or date.today())
    current_balances = {
        acc.id: balance_on_date(acc, today, transactions, snapshots) for acc in accounts
    }
    total_magnitude = sum((abs(b) for b in current_balances.values()), _ZERO)

    major_accounts: list[Account] = list(accounts)
    minor_accounts: list[Account] = []
    grouping_active = False

    if len(accounts) >= MIN_ACCOUNTS_FOR_GROUPING and total_magnitude > 0:
        threshold = total_magnitude * GROUPING_THRESHOLD
        candidates_major = [acc for acc in accounts if abs(current_balances[acc.id]) >= threshold]
        candidates_minor = [acc for acc in accounts if abs(current_balances[acc.id]) < threshold]

        if len(candidates_minor) > 1:
            grouping_active = True
            major_accounts = candidates_major
            minor_accounts = candidates_minor

    series_config: dict[str, SeriesStyle] = {
        TOTAL_SERIES: SeriesStyle(label=TOTAL_SERIES, color=TOTAL_COLOR)
    }
    for index, acc in enumerate(major_accounts):
        series_config[acc.name] = SeriesStyle(label=acc.name, color=_account_color(acc, index))
    if grouping_active:
        series_config[OTHERS_SERIES] = SeriesStyle(label=OTHERS_SERIES, color=OTHERS_COLOR)

    return GroupingResult(
        major_accounts=tuple(major_accounts),
        minor_accounts=tuple(minor_accounts),
        grouping_active=grouping_active,
        series_config=series_config,
        current_balances=current_balances,
    )


def _oldest_relevant_date(
    accounts: Sequence[Account], snapshots: Sequence[BalanceSnapshot], today: date
) -> date:
    account_ids = {acc.id for acc in accounts}
    snapshot_days = [to_day(s.date) for s in snapshots if s.account_id in account_ids]
    if snapshot_days:
        return min(snapshot_days)
    if accounts:
        return min(to_day(acc.created_at) for acc in accounts)
    return today


def _index_by_account(items: Iterable) -> dict[int, list]:
    index: dict[int, list] = defaultdict(list)
    for item in items:
        index[item.account_id].append(item)
    return index


def build_chart_series(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    snapshots: Sequence[BalanceSnapshot],
    grouping: GroupingResult,
    exploded: bool = False,
    today: Optional[date] = None,
) -> ChartSeries:
    """Build the bucketed multi-account balance series.

    Args:
        accounts: All accounts
        transactions: All transactions
        snapshots: All balance snapshots
        grouping: Result of compute_grouping for the same collections
        exploded: If True, chart the minor accounts individually instead of
            the major accounts, "Others" and the total
        today: Last day of the chart (defaults to the current date)

    Returns:
        ChartSeries with one point per bucket in chronological order
    """
    if not accounts:
        return ChartSeries(data_points=(), series_config={})

    today = to_day(today or date.today())
    relevant_accounts = grouping.minor_accounts if exploded else tuple(accounts)
    oldest = _oldest_relevant_date(relevant_accounts, snapshots, today)
    settings = get_chart_time_settings(oldest, today)

    txns_by_account = _index_by_account(transactions)
    snaps_by_account = _index_by_account(snapshots)

    def balance_at(acc: Account, day: date) -> Decimal:
        return balance_on_date(acc, day, txns_by_account[acc.id], snaps_by_account[acc.id])

    points: list[ChartPoint] = []

    if exploded:
        series_config = {
            acc.name: SeriesStyle(label=acc.name, color=_account_color(acc, index))
            for index, acc in enumerate(grouping.minor_accounts)
        }
        for day in iter_bucket_dates(settings, today):
            values = {acc.name: round_money(balance_at(acc, day)) for acc in grouping.minor_accounts}
            points.append(ChartPoint(date=day, label=settings.label(day), values=values))
        return ChartSeries(data_points=tuple(points), series_config=series_config)

    for day in iter_bucket_dates(settings, today):
        values: dict[str, Decimal] = {}
        total = _ZERO
        for acc in grouping.major_accounts:
            balance = balance_at(acc, day)
            values[acc.name] = round_money(balance)
            total += balance
        if grouping.grouping_active:
            others = sum((balance_at(acc, day) for acc in grouping.minor_accounts), _ZERO)
            values[OTHERS_SERIES] = round_money(others)
            total += others
        values[TOTAL_SERIES] = round_money(total)
        points.append(ChartPoint(date=day, label=settings.label(day), values=values))

    return ChartSeries(data_points=tuple(points), series_config=dict(grouping.series_config))


def build_account_series(
    account: Account,
    transactions: Sequence[Transaction],
    snapshots: Sequence[BalanceSnapshot],
    today: Optional[date] = None,
) -> ChartSeries:
    """Build the bucketed balance series of a single account.

    The chart starts at the earlier of the account's balance start date and
    its oldest snapshot.
    """
    today = to_day(today or date.today())
    account_txns = [t for t in transactions if t.account_id == account.id]
    account_snaps = [s for s in snapshots if s.account_id == account.id]

    oldest = to_day(account.balance_start_date)
    if account_snaps:
        oldest = min(oldest, min(to_day(s.date) for s in account_snaps))

    settings = get_chart_time_settings(oldest, today)
    points = tuple(
        ChartPoint(
            date=day,
            label=settings.label(day),
            values={account.name: round_money(balance_on_date(account, day, account_txns, account_snaps))},
        )
        for day in iter_bucket_dates(settings, today)
    )
    series_config = {
        account.name: SeriesStyle(label=account.name, color=account.color or ACCOUNT_COLORS[0])
    }
    return ChartSeries(data_points=points, series_config=series_config)
