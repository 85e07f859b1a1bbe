"""Balance chart command.

Prints the bucketed balance series as a table, one row per bucket and one
column per series.
"""

import click
from budgetwise.cli.account_resolution import resolve_account_or_exit
from budgetwise.cli.date_filters import parse_date_or_exit
from budgetwise.domain.account import AccountService
from budgetwise.domain.balance import BalanceService
from budgetwise.domain.entities import ChartSeries


def _print_series(series: ChartSeries, column_width: int = 16) -> None:
    keys = list(series.series_config)
    header = f"{'Date':<12}" + "".join(
        f"{series.series_config[key].label[:column_width - 1]:>{column_width}}" for key in keys
    )
    click.echo(header)
    click.echo("-" * len(header))
    for point in series.data_points:
        cells = "".join(
            f"{point.values.get(key, 0):>{column_width},.2f}" for key in keys
        )
        click.echo(f"{point.label:<12}{cells}")


@click.command()
@click.option("--account", help="Chart a single account (name or ID)")
@click.option("--explode", is_flag=True, help="Chart the small accounts grouped under 'Others'")
@click.option("--as-of", help="Last day of the chart (defaults to today)")
@click.pass_context
def chart(ctx, account: str | None, explode: bool, as_of: str | None):
    """Show how balances evolved over time.

    The bucket size (days, months, quarters or years) follows the span of
    the recorded balances. Accounts below 2% of the combined balance are
    merged into an "Others" series.

    Examples:
        budgetwise chart
        budgetwise chart --explode
        budgetwise chart --account Savings
    """
    db = ctx.obj["db"]
    service = BalanceService(db)
    account_service = AccountService(db)
    today = parse_date_or_exit(ctx, as_of, "chart end date") if as_of else None

    if account and explode:
        click.echo("Error: --explode cannot be combined with --account.", err=True)
        ctx.exit(1)

    if account:
        account_id = resolve_account_or_exit(ctx, account_service, account)
        _print_series(service.build_account_series(account_id, today=today))
        return

    if not account_service.list_accounts():
        click.echo("No accounts found.")
        return

    series = service.build_chart_series(exploded=explode, today=today)
    # Exploded series only carry minor accounts
    if explode and not series.series_config:
        click.echo("No accounts are grouped under 'Others'.")
        return

    _print_series(series)


def register_commands(cli):
    """Register chart command with main CLI."""
    cli.add_command(chart)
