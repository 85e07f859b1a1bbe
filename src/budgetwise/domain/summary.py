"""Summary domain service."""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from dateutil.relativedelta import relativedelta

from budgetwise.database.base import Database
from budgetwise.domain import balance_calculations as calc
from budgetwise.domain.entities import (
    MonthlySummary,
    PeriodBar,
    PeriodSummary,
    Transaction,
    TransactionType,
)
from budgetwise.domain.errors import ValidationError

TIMEFRAMES = ("month", "year")


def start_of_month(day: date) -> date:
    """Return the first day of the day's month."""
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    """Return the last day of the day's month."""
    return start_of_month(day) + relativedelta(months=1) - timedelta(days=1)


def percentage_change(current: Decimal, previous: Decimal) -> float:
    """Percentage change from previous to current.

    A zero previous value gives infinity when current is positive, else 0.
    """
    if previous == 0:
        return float("inf") if current > 0 else 0.0
    return float((current - previous) / previous * 100)


class SummaryService:
    """Service for income/expense summaries and dashboard totals."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    @staticmethod
    def split_totals(transactions: Sequence[Transaction]) -> tuple[Decimal, Decimal]:
        """Return (income, expense) totals of transactions."""
        income = Decimal("0")
        expense = Decimal("0")
        for txn in transactions:
            if txn.type == TransactionType.INCOME:
                income += txn.amount
            else:
                expense += txn.amount
        return income, expense

    def monthly_summary(self, today: Optional[date] = None) -> MonthlySummary:
        """Income and expense of the current month plus the total balance."""
        today = today or date.today()
        month_transactions = self.db.list_transactions(
            start_date=start_of_month(today), end_date=end_of_month(today)
        )
        income, expense = self.split_totals(month_transactions)

        total_balance = calc.total_current_balance(
            self.db.list_accounts(),
            self.db.list_transactions(),
            self.db.list_snapshots(),
            today=today,
        )
        return MonthlySummary(
            monthly_income=income,
            monthly_expense=expense,
            total_balance=total_balance,
        )

    def period_summary(self, timeframe: str = "month", today: Optional[date] = None) -> PeriodSummary:
        """Compare income and expense of the current period with the previous one.

        Args:
            timeframe: "month" compares this month so far with last month;
                "year" compares the last twelve months with the twelve
                before them
            today: Reference day (defaults to the current date)

        Returns:
            PeriodSummary with totals, percentage changes and chart bars

        Raises:
            ValidationError: If timeframe is unknown
        """
        if timeframe not in TIMEFRAMES:
            raise ValidationError(
                f"Unknown timeframe '{timeframe}'. Supported timeframes: {', '.join(TIMEFRAMES)}"
            )
        today = today or date.today()

        if timeframe == "month":
            current_start = start_of_month(today)
            previous_start = start_of_month(today - relativedelta(months=1))
            previous_end = end_of_month(previous_start)
        else:
            current_start = start_of_month(today - relativedelta(years=1))
            previous_start = start_of_month(today - relativedelta(years=2))
            previous_end = end_of_month(today - relativedelta(years=1))

        transactions = self.db.list_transactions(start_date=previous_start, end_date=today)
        current = [t for t in transactions if current_start <= t.date <= today]
        previous = [t for t in transactions if previous_start <= t.date <= previous_end]

        current_income, current_expense = self.split_totals(current)
        previous_income, previous_expense = self.split_totals(previous)

        if timeframe == "month":
            bars = self.daily_bars(current, current_start, end_of_month(today))
        else:
            bars = self.monthly_bars(current, previous, current_start, today)

        return PeriodSummary(
            timeframe=timeframe,
            total_income=current_income,
            total_expense=current_expense,
            income_change=percentage_change(current_income, previous_income),
            expense_change=percentage_change(current_expense, previous_expense),
            bars=tuple(bars),
        )

    def daily_bars(
        self, transactions: Sequence[Transaction], start: date, end: date
    ) -> list[PeriodBar]:
        """One bar per day between start and end (inclusive)."""
        totals: dict[date, list[Decimal]] = defaultdict(lambda: [Decimal("0"), Decimal("0")])
        for txn in transactions:
            slot = totals[calc.to_day(txn.date)]
            if txn.type == TransactionType.INCOME:
                slot[0] += txn.amount
            else:
                slot[1] += txn.amount

        bars = []
        day = start
        while day <= end:
            income, expense = totals.get(day, (Decimal("0"), Decimal("0")))
            bars.append(
                PeriodBar(
                    label=str(day.day),
                    income=calc.round_money(income),
                    expense=calc.round_money(expense),
                )
            )
            day += timedelta(days=1)
        return bars

    def monthly_bars(
        self,
        current: Sequence[Transaction],
        previous: Sequence[Transaction],
        start: date,
        end: date,
    ) -> list[PeriodBar]:
        """One bar per month of the current period, with last year's values alongside.

        Previous-period transactions are shifted forward one year so each bar
        shows the same calendar month of both periods.
        """
        zero = Decimal("0")
        totals: dict[str, list[Decimal]] = {}
        month = start_of_month(start)
        while month <= end:
            totals[month.strftime("%Y-%m")] = [zero, zero, zero, zero]
            month += relativedelta(months=1)

        for txn in current:
            key = txn.date.strftime("%Y-%m")
            if key in totals:
                totals[key][0 if txn.type == TransactionType.INCOME else 1] += txn.amount

        for txn in previous:
            key = (txn.date + relativedelta(years=1)).strftime("%Y-%m")
            if key in totals:
                totals[key][2 if txn.type == TransactionType.INCOME else 3] += txn.amount

        bars = []
        for key in sorted(totals):
            income, expense, prev_income, prev_expense = totals[key]
            label = date(int(key[:4]), int(key[5:]), 1).strftime("%b")
            bars.append(
                PeriodBar(
                    label=label,
                    income=calc.round_money(income),
                    expense=calc.round_money(expense),
                    previous_income=calc.round_money(prev_income),
                    previous_expense=calc.round_money(prev_expense),
                )
            )
        return bars
