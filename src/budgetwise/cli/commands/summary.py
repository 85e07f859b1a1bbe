"""Income/expense summary command."""

import click
from budgetwise.cli.date_filters import parse_date_or_exit
from budgetwise.cli.error_handling import handle_domain_error
from budgetwise.domain.summary import TIMEFRAMES, SummaryService
from budgetwise.domain.transaction import TransactionService


def _format_change(change: float) -> str:
    if change == float("inf"):
        return "new"
    return f"{change:+.1f}%"


@click.command()
@click.option(
    "--timeframe",
    type=click.Choice(TIMEFRAMES, case_sensitive=False),
    default="month",
    show_default=True,
    help="Compare this month with last month, or the last year with the one before",
)
@click.option("--as-of", help="Reference day (defaults to today)")
@click.option("--bars", "show_bars", is_flag=True, help="Also print the per-day or per-month totals")
@click.pass_context
def summary(ctx, timeframe: str, as_of: str | None, show_bars: bool):
    """Show this month's totals and how the period compares with the previous one.

    Examples:
        budgetwise summary
        budgetwise summary --timeframe year --bars
    """
    db = ctx.obj["db"]
    service = SummaryService(db)
    today = parse_date_or_exit(ctx, as_of, "reference day") if as_of else None

    monthly = service.monthly_summary(today=today)
    try:
        period = service.period_summary(timeframe=timeframe.lower(), today=today)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo("\nThis month")
    click.echo("-" * 40)
    click.echo(f"{'Income:':<20} ${monthly.monthly_income:>15,.2f}")
    click.echo(f"{'Expense:':<20} ${monthly.monthly_expense:>15,.2f}")
    click.echo(f"{'Total balance:':<20} ${monthly.total_balance:>15,.2f}")

    title = "This month vs last month" if period.timeframe == "month" else "Last 12 months vs previous 12"
    click.echo(f"\n{title}")
    click.echo("-" * 40)
    click.echo(
        f"{'Income:':<20} ${period.total_income:>15,.2f}  ({_format_change(period.income_change)})"
    )
    click.echo(
        f"{'Expense:':<20} ${period.total_expense:>15,.2f}  ({_format_change(period.expense_change)})"
    )

    if show_bars:
        click.echo()
        if period.timeframe == "month":
            click.echo(f"{'Day':<6} {'Income':>12} {'Expense':>12}")
            for bar in period.bars:
                click.echo(f"{bar.label:<6} {bar.income:>12,.2f} {bar.expense:>12,.2f}")
        else:
            click.echo(
                f"{'Month':<6} {'Income':>12} {'Expense':>12} {'Prev income':>12} {'Prev expense':>12}"
            )
            for bar in period.bars:
                click.echo(
                    f"{bar.label:<6} {bar.income:>12,.2f} {bar.expense:>12,.2f} "
                    f"{bar.previous_income:>12,.2f} {bar.previous_expense:>12,.2f}"
                )

    recent = TransactionService(db).recent_transactions()
    if recent:
        click.echo("\nRecent transactions")
        click.echo("-" * 40)
        for txn in recent:
            click.echo(f"{str(txn.date):<12} {txn.signed_amount:>+12,.2f}  {txn.category}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
