"""Tests for the pure balance reconstruction and chart functions."""

from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from budgetwise.domain.balance_calculations import (
    ACCOUNT_COLORS,
    OTHERS_SERIES,
    TOTAL_SERIES,
    balance_on_date,
    build_account_series,
    build_chart_series,
    compute_grouping,
    get_chart_time_settings,
    iter_bucket_dates,
    round_money,
    total_current_balance,
)
from budgetwise.domain.entities import TransactionType
from conftest import make_account, make_snapshot, make_transaction

TODAY = date(2024, 6, 30)


class TestChartTimeSettings:
    def test_short_span_uses_at_least_thirty_daily_buckets(self):
        settings = get_chart_time_settings(date(2024, 6, 20), TODAY)

        assert settings.granularity == "daily"
        assert settings.start_date == TODAY - timedelta(days=29)
        assert len(list(iter_bucket_dates(settings, TODAY))) == 30

    def test_sixty_day_span_stays_daily(self):
        settings = get_chart_time_settings(TODAY - timedelta(days=60), TODAY)

        assert settings.granularity == "daily"
        assert settings.start_date == TODAY - timedelta(days=60)
        assert len(list(iter_bucket_dates(settings, TODAY))) == 61

    def test_daily_label(self):
        settings = get_chart_time_settings(TODAY, TODAY)
        assert settings.label(date(2024, 1, 5)) == "5 Jan"

    def test_monthly_buckets_start_at_oldest_month(self):
        settings = get_chart_time_settings(date(2024, 1, 17), TODAY)

        assert settings.granularity == "monthly"
        assert settings.start_date == date(2024, 1, 1)
        assert settings.label(date(2024, 3, 1)) == "Mar 24"
        buckets = list(iter_bucket_dates(settings, TODAY))
        assert buckets[0] == date(2024, 1, 1)
        assert buckets[-1] == date(2024, 6, 1)
        assert len(buckets) == 6

    def test_quarterly_buckets_start_at_oldest_quarter(self):
        settings = get_chart_time_settings(date(2022, 5, 10), TODAY)

        assert settings.granularity == "quarterly"
        assert settings.start_date == date(2022, 4, 1)
        assert settings.label(date(2022, 4, 1)) == "Q2 '22"
        assert settings.step(date(2022, 4, 1)) == date(2022, 7, 1)

    def test_yearly_buckets_start_at_oldest_year(self):
        settings = get_chart_time_settings(date(2019, 8, 3), TODAY)

        assert settings.granularity == "yearly"
        assert settings.start_date == date(2019, 1, 1)
        assert settings.label(date(2020, 1, 1)) == "2020"
        assert list(iter_bucket_dates(settings, TODAY))[-1] == date(2024, 1, 1)

    def test_accepts_datetimes(self):
        settings = get_chart_time_settings(datetime(2024, 6, 25, 18, 30), datetime(2024, 6, 30, 8, 0))
        assert settings.start_date == date(2024, 6, 1)


class TestBalanceOnDate:
    def test_single_snapshot_without_transactions(self):
        account = make_account(1)
        snapshots = [make_snapshot(1, 1, date(2024, 3, 10), "250.00")]

        assert balance_on_date(account, date(2024, 3, 10), [], snapshots) == Decimal("250.00")
        assert balance_on_date(account, date(2024, 5, 1), [], snapshots) == Decimal("250.00")
        assert balance_on_date(account, date(2024, 3, 9), [], snapshots) == Decimal("0")

    def test_transaction_on_snapshot_day_is_excluded(self):
        account = make_account(1)
        snapshots = [make_snapshot(1, 1, date(2024, 3, 10), "100")]
        transactions = [
            make_transaction(1, 1, date(2024, 3, 10), "30", TransactionType.EXPENSE),
            make_transaction(2, 1, date(2024, 3, 11), "40", TransactionType.INCOME),
        ]

        assert balance_on_date(account, date(2024, 3, 10), transactions, snapshots) == Decimal("100")
        assert balance_on_date(account, date(2024, 3, 11), transactions, snapshots) == Decimal("140")

    def test_checking_scenario(self):
        checking = make_account(1, name="Checking", start=date(2024, 1, 1))
        snapshots = [make_snapshot(1, 1, date(2024, 1, 10), "500")]
        transactions = [
            make_transaction(1, 1, date(2024, 1, 15), "50", TransactionType.EXPENSE),
            make_transaction(2, 1, date(2024, 1, 20), "200", TransactionType.INCOME),
        ]

        assert balance_on_date(checking, date(2024, 1, 12), transactions, snapshots) == Decimal("500")
        assert balance_on_date(checking, date(2024, 1, 16), transactions, snapshots) == Decimal("450")
        assert balance_on_date(checking, date(2024, 1, 25), transactions, snapshots) == Decimal("650")

    def test_latest_snapshot_on_or_before_target_wins(self):
        account = make_account(1)
        snapshots = [
            make_snapshot(1, 1, date(2024, 1, 1), "100"),
            make_snapshot(2, 1, date(2024, 2, 1), "900"),
        ]
        transactions = [make_transaction(1, 1, date(2024, 1, 15), "50")]

        assert balance_on_date(account, date(2024, 1, 31), transactions, snapshots) == Decimal("50")
        # The later snapshot supersedes the transaction before it
        assert balance_on_date(account, date(2024, 2, 15), transactions, snapshots) == Decimal("900")

    def test_ignores_other_accounts(self):
        account = make_account(1)
        snapshots = [
            make_snapshot(1, 1, date(2024, 1, 1), "100"),
            make_snapshot(2, 2, date(2024, 1, 5), "5000"),
        ]
        transactions = [make_transaction(1, 2, date(2024, 1, 3), "75", TransactionType.INCOME)]

        assert balance_on_date(account, date(2024, 1, 10), transactions, snapshots) == Decimal("100")

    def test_initial_balance_is_not_used_without_snapshot(self):
        account = replace(make_account(1), initial_balance=Decimal("1000"))
        transactions = [make_transaction(1, 1, date(2024, 1, 3), "75", TransactionType.INCOME)]

        assert balance_on_date(account, date(2024, 1, 10), transactions, []) == Decimal("0")

    def test_datetime_target_is_normalized_to_day(self):
        account = make_account(1)
        snapshots = [make_snapshot(1, 1, date(2024, 1, 10), "500")]
        transactions = [make_transaction(1, 1, date(2024, 1, 11), "20")]

        result = balance_on_date(account, datetime(2024, 1, 11, 0, 0, 1), transactions, snapshots)
        assert result == Decimal("480")

    def test_is_repeatable(self):
        account = make_account(1)
        snapshots = [make_snapshot(1, 1, date(2024, 1, 10), "500")]
        transactions = [make_transaction(1, 1, date(2024, 1, 11), "20")]

        first = balance_on_date(account, date(2024, 1, 20), transactions, snapshots)
        second = balance_on_date(account, date(2024, 1, 20), transactions, snapshots)
        assert first == second == Decimal("480")


def test_total_current_balance_sums_accounts():
    accounts = [make_account(1), make_account(2), make_account(3)]
    snapshots = [
        make_snapshot(1, 1, date(2024, 6, 1), "100.10"),
        make_snapshot(2, 2, date(2024, 6, 1), "-40.05"),
    ]
    transactions = [make_transaction(1, 1, date(2024, 6, 10), "0.05", TransactionType.INCOME)]

    total = total_current_balance(accounts, transactions, snapshots, today=TODAY)
    assert total == Decimal("60.10")


def test_total_current_balance_without_accounts():
    assert total_current_balance([], [], [], today=TODAY) == Decimal("0")


def _grouping_fixture(balances):
    accounts = [make_account(i + 1, name=f"Account {i + 1}") for i in range(len(balances))]
    snapshots = [
        make_snapshot(i + 1, i + 1, date(2024, 6, 1), balance) for i, balance in enumerate(balances)
    ]
    return accounts, snapshots


class TestComputeGrouping:
    def test_small_accounts_are_grouped(self):
        accounts, snapshots = _grouping_fixture([1000, 10, 5, 3])

        result = compute_grouping(accounts, [], snapshots, today=TODAY)

        assert result.grouping_active is True
        assert [a.name for a in result.major_accounts] == ["Account 1"]
        assert [a.name for a in result.minor_accounts] == ["Account 2", "Account 3", "Account 4"]
        assert list(result.series_config) == [TOTAL_SERIES, "Account 1", OTHERS_SERIES]
        assert result.current_balances[1] == Decimal("1000")

    def test_two_accounts_never_group(self):
        accounts, snapshots = _grouping_fixture([100000, 1])

        result = compute_grouping(accounts, [], snapshots, today=TODAY)

        assert result.grouping_active is False
        assert len(result.major_accounts) == 2
        assert result.minor_accounts == ()
        assert OTHERS_SERIES not in result.series_config

    def test_single_minor_account_is_not_grouped(self):
        accounts, snapshots = _grouping_fixture([1000, 900, 5])

        result = compute_grouping(accounts, [], snapshots, today=TODAY)

        assert result.grouping_active is False
        assert len(result.major_accounts) == 3
        assert result.minor_accounts == ()

    def test_zero_total_magnitude_is_inactive(self):
        accounts = [make_account(1), make_account(2), make_account(3)]

        result = compute_grouping(accounts, [], [], today=TODAY)

        assert result.grouping_active is False
        assert len(result.major_accounts) == 3

    def test_negative_balances_count_by_magnitude(self):
        accounts, snapshots = _grouping_fixture([-1000, 10, -5, 800])

        result = compute_grouping(accounts, [], snapshots, today=TODAY)

        assert result.grouping_active is True
        assert {a.id for a in result.major_accounts} == {1, 4}
        assert {a.id for a in result.minor_accounts} == {2, 3}

    def test_empty_accounts(self):
        result = compute_grouping([], [], [], today=TODAY)

        assert result.grouping_active is False
        assert result.major_accounts == ()
        assert result.series_config == {}

    def test_series_colors(self):
        accounts = [make_account(i + 1, color="#ff0000" if i == 1 else None) for i in range(6)]
        snapshots = [make_snapshot(i + 1, i + 1, date(2024, 6, 1), 100) for i in range(6)]

        config = compute_grouping(accounts, [], snapshots, today=TODAY).series_config

        assert config["Account 1"].color == ACCOUNT_COLORS[0]
        assert config["Account 2"].color == "#ff0000"
        assert config["Account 6"].color == ACCOUNT_COLORS[0]


class TestBuildChartSeries:
    def test_ten_day_span_has_thirty_ordered_points(self):
        accounts = [make_account(1), make_account(2)]
        snapshots = [
            make_snapshot(1, 1, TODAY - timedelta(days=10), "100"),
            make_snapshot(2, 2, TODAY - timedelta(days=5), "50"),
        ]
        grouping = compute_grouping(accounts, [], snapshots, today=TODAY)

        series = build_chart_series(accounts, [], snapshots, grouping, today=TODAY)

        dates = [p.date for p in series.data_points]
        assert len(dates) >= 30
        assert dates == sorted(dates)
        assert dates[-1] == TODAY

    def test_total_is_sum_of_accounts(self):
        accounts = [make_account(1), make_account(2)]
        snapshots = [
            make_snapshot(1, 1, TODAY - timedelta(days=10), "100"),
            make_snapshot(2, 2, TODAY - timedelta(days=5), "50"),
        ]
        transactions = [make_transaction(1, 1, TODAY - timedelta(days=2), "30")]
        grouping = compute_grouping(accounts, transactions, snapshots, today=TODAY)

        series = build_chart_series(accounts, transactions, snapshots, grouping, today=TODAY)

        by_date = {p.date: p.values for p in series.data_points}
        assert by_date[TODAY - timedelta(days=20)][TOTAL_SERIES] == Decimal("0.00")
        assert by_date[TODAY - timedelta(days=7)] == {
            "Account 1": Decimal("100.00"),
            "Account 2": Decimal("0.00"),
            TOTAL_SERIES: Decimal("100.00"),
        }
        assert by_date[TODAY][TOTAL_SERIES] == Decimal("120.00")

    def test_grouped_series_has_others(self):
        accounts, snapshots = _grouping_fixture([1000, 10, 5, 3])
        grouping = compute_grouping(accounts, [], snapshots, today=TODAY)

        series = build_chart_series(accounts, [], snapshots, grouping, today=TODAY)

        last = series.data_points[-1].values
        assert last == {
            "Account 1": Decimal("1000.00"),
            OTHERS_SERIES: Decimal("18.00"),
            TOTAL_SERIES: Decimal("1018.00"),
        }
        assert OTHERS_SERIES in series.series_config

    def test_exploded_series_lists_minor_accounts(self):
        accounts, snapshots = _grouping_fixture([1000, 10, 5, 3])
        grouping = compute_grouping(accounts, [], snapshots, today=TODAY)

        series = build_chart_series(accounts, [], snapshots, grouping, exploded=True, today=TODAY)

        assert list(series.series_config) == ["Account 2", "Account 3", "Account 4"]
        assert series.data_points[-1].values == {
            "Account 2": Decimal("10.00"),
            "Account 3": Decimal("5.00"),
            "Account 4": Decimal("3.00"),
        }

    def test_exploded_series_is_empty_without_grouping(self):
        accounts, snapshots = _grouping_fixture([1000, 900])
        grouping = compute_grouping(accounts, [], snapshots, today=TODAY)

        series = build_chart_series(accounts, [], snapshots, grouping, exploded=True, today=TODAY)

        assert not grouping.grouping_active
        assert series.series_config == {}

    def test_falls_back_to_account_creation_without_snapshots(self):
        accounts = [make_account(1, start=date(2022, 6, 1))]
        grouping = compute_grouping(accounts, [], [], today=TODAY)

        series = build_chart_series(accounts, [], [], grouping, today=TODAY)

        assert series.data_points[0].date == date(2022, 4, 1)
        assert series.data_points[0].label == "Q2 '22"
        assert all(p.values[TOTAL_SERIES] == Decimal("0.00") for p in series.data_points)

    def test_no_accounts(self):
        grouping = compute_grouping([], [], [], today=TODAY)

        series = build_chart_series([], [], [], grouping, today=TODAY)

        assert series.data_points == ()
        assert series.series_config == {}

    def test_rounds_only_at_emission(self):
        accounts = [make_account(1), make_account(2), make_account(3)]
        snapshots = [
            make_snapshot(1, 1, TODAY, "0.004"),
            make_snapshot(2, 2, TODAY, "0.004"),
            make_snapshot(3, 3, TODAY, "0.004"),
        ]
        grouping = compute_grouping(accounts, [], snapshots, today=TODAY)

        series = build_chart_series(accounts, [], snapshots, grouping, today=TODAY)

        last = series.data_points[-1].values
        assert last["Account 1"] == Decimal("0.00")
        assert last[TOTAL_SERIES] == Decimal("0.01")


def test_build_account_series_starts_at_balance_start_date():
    account = make_account(1, name="Savings", start=date(2024, 1, 20))
    snapshots = [make_snapshot(1, 1, date(2024, 2, 1), "300")]
    transactions = [make_transaction(1, 1, date(2024, 4, 15), "100", TransactionType.INCOME)]

    series = build_account_series(account, transactions, snapshots, today=TODAY)

    assert series.data_points[0].date == date(2024, 1, 1)
    assert [p.values["Savings"] for p in series.data_points] == [
        Decimal("0.00"),
        Decimal("300.00"),
        Decimal("300.00"),
        Decimal("300.00"),
        Decimal("400.00"),
        Decimal("400.00"),
    ]
    assert list(series.series_config) == ["Savings"]


@pytest.mark.parametrize(
    "value,expected",
    [
        (Decimal("1.005"), Decimal("1.01")),
        (Decimal("-1.005"), Decimal("-1.01")),
        (Decimal("2"), Decimal("2.00")),
    ],
)
def test_round_money(value, expected):
    assert round_money(value) == expected
