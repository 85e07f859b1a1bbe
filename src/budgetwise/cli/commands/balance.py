"""Balance snapshot commands."""

import click
from budgetwise.cli.account_resolution import resolve_account_or_exit
from budgetwise.cli.date_filters import parse_amount_or_exit, parse_date_or_exit
from budgetwise.cli.error_handling import handle_domain_error
from budgetwise.domain.account import AccountService
from budgetwise.domain.balance import BalanceService


@click.group()
def balance_group():
    """Record known balances and inspect reconstructed ones."""
    pass


@balance_group.command("set")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--amount", required=True, help="Balance at the end of the day")
@click.option("--date", "snap_date", default="today", help="Day of the balance (defaults to today)")
@click.pass_context
def set_balance(ctx, account: str, amount: str, snap_date: str):
    """Record the known balance of an account on a day.

    A balance already recorded for that day is overwritten.

    Examples:
        budgetwise balance set --account Checking --amount 1250.00
        budgetwise balance set --account 1 --amount 500 --date 2024-01-12
    """
    db = ctx.obj["db"]
    service = BalanceService(db)
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    day = parse_date_or_exit(ctx, snap_date)
    value = parse_amount_or_exit(ctx, amount, "balance")

    try:
        snapshot_id, created = service.set_balance(account_id, day, value)
    except ValueError as e:
        handle_domain_error(ctx, e)

    verb = "Recorded" if created else "Overwrote"
    click.echo(f"{verb} balance ${value:,.2f} on {day} (snapshot {snapshot_id})")


@balance_group.command("list")
@click.option("--account", help="Account name or ID")
@click.pass_context
def list_snapshots(ctx, account: str | None):
    """List recorded balances, newest first."""
    db = ctx.obj["db"]
    service = BalanceService(db)
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None
    snapshots = service.list_snapshots(account_id=account_id)
    if not snapshots:
        click.echo("No balances recorded.")
        return

    names = {acc.id: acc.name for acc in account_service.list_accounts()}

    click.echo(f"\n{'ID':<6} {'Date':<12} {'Account':<24} {'Balance':>14}")
    click.echo("-" * 60)
    for snap in snapshots:
        balance_str = f"${snap.balance:,.2f}"
        click.echo(
            f"{snap.id:<6} {str(snap.date):<12} {names.get(snap.account_id, 'Unknown')[:24]:<24} "
            f"{balance_str:>14}"
        )


@balance_group.command("update")
@click.argument("snapshot_id", type=int)
@click.option("--amount", help="New balance")
@click.option("--date", "snap_date", help="New day")
@click.pass_context
def update_snapshot(ctx, snapshot_id: int, amount: str | None, snap_date: str | None):
    """Change the day or amount of a recorded balance."""
    db = ctx.obj["db"]
    service = BalanceService(db)

    if amount is None and snap_date is None:
        click.echo("Error: Nothing to update. Pass --amount or --date.", err=True)
        ctx.exit(1)

    value = parse_amount_or_exit(ctx, amount, "balance") if amount is not None else None
    day = parse_date_or_exit(ctx, snap_date) if snap_date is not None else None

    try:
        service.update_snapshot(snapshot_id, day=day, balance=value)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated snapshot {snapshot_id}")


@balance_group.command("delete")
@click.argument("snapshot_id", type=int)
@click.pass_context
def delete_snapshot(ctx, snapshot_id: int):
    """Delete a recorded balance."""
    db = ctx.obj["db"]
    service = BalanceService(db)

    try:
        service.delete_snapshot(snapshot_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted snapshot {snapshot_id}")


@balance_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.option("--date", "on_date", default="today", help="Day to reconstruct (defaults to today)")
@click.pass_context
def show_balance(ctx, account: str, on_date: str):
    """Show an account's reconstructed balance at the end of a day.

    The balance starts from the latest recorded balance on or before the
    day and adds the transactions after it.

    Examples:
        budgetwise balance show Checking
        budgetwise balance show 1 --date "last month"
    """
    db = ctx.obj["db"]
    service = BalanceService(db)
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    day = parse_date_or_exit(ctx, on_date)

    balance = service.balance_on_date(account_id, day)
    account_obj = account_service.get_account(account_id)
    click.echo(f"{account_obj.name} on {day}: ${balance:,.2f}")


@balance_group.command("total")
@click.pass_context
def total_balance(ctx):
    """Show the sum of all accounts' balances today."""
    db = ctx.obj["db"]
    service = BalanceService(db)

    total = service.total_current_balance()
    click.echo(f"Total balance: ${total:,.2f}")


def register_commands(cli):
    """Register balance commands with main CLI."""
    cli.add_command(balance_group, name="balance")
