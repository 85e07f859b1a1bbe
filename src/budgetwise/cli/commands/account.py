"""Account management commands."""

from decimal import Decimal

import click
from budgetwise.cli.account_resolution import resolve_account_or_exit
from budgetwise.cli.date_filters import parse_amount_or_exit, parse_date_or_exit
from budgetwise.cli.error_handling import handle_domain_error
from budgetwise.domain.account import AccountService
from budgetwise.domain.balance import BalanceService


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--initial-balance", default="0", help="Balance the account was opened with")
@click.option("--start-date", help="Day balance tracking starts (defaults to today)")
@click.option("--color", help="Chart color (e.g., '#22c55e')")
@click.option("--icon-url", help="Icon URL")
@click.pass_context
def create_account(
    ctx,
    name: str,
    initial_balance: str,
    start_date: str | None,
    color: str | None,
    icon_url: str | None,
):
    """Create a new account.

    Examples:
        budgetwise account create "Checking"
        budgetwise account create "Savings" --initial-balance 1500 --start-date 2024-01-01
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    balance = parse_amount_or_exit(ctx, initial_balance, "initial balance")
    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None

    try:
        account_id = service.create_account(
            name=name,
            initial_balance=balance,
            balance_start_date=start,
            color=color,
            icon_url=icon_url,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created account '{name.strip()}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their current balance."""
    db = ctx.obj["db"]
    service = AccountService(db)
    balance_service = BalanceService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    total = Decimal("0")
    for acc in accounts:
        balance = balance_service.current_balance(acc.id)
        total += balance
        balance_str = f"${balance:,.2f}"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:24s} | Since: {acc.balance_start_date} | {balance_str:>14}"
        )
    click.echo("-" * 70)
    total_str = f"${total:,.2f}"
    click.echo(f"{'TOTAL':<52} {total_str:>17}")


@account_group.command("edit")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--color", help="New chart color")
@click.option("--icon-url", help="New icon URL")
@click.option("--clear-color", is_flag=True, help="Remove the custom color")
@click.option("--clear-icon", is_flag=True, help="Remove the icon")
@click.pass_context
def edit_account(
    ctx,
    account: str,
    name: str | None,
    color: str | None,
    icon_url: str | None,
    clear_color: bool,
    clear_icon: bool,
) -> None:
    """Edit an account's name, color or icon.

    ACCOUNT can be an account name or ID.

    Examples:
        budgetwise account edit "Checking" --name "Main Checking"
        budgetwise account edit 1 --color "#0ea5e9"
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    if not any([name, color, icon_url, clear_color, clear_icon]):
        click.echo("Error: Nothing to update. Pass --name, --color or --icon-url.", err=True)
        ctx.exit(1)

    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        service.update_account(
            account_id=account_id,
            name=name,
            color=color,
            icon_url=icon_url,
            clear_color=clear_color,
            clear_icon=clear_icon,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    updated = service.get_account(account_id)
    click.echo(f"Updated account '{updated.name}' (ID: {account_id})")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account together with its transactions and balances.

    ACCOUNT can be an account name or ID.

    Examples:
        budgetwise account delete "Checking"
        budgetwise account delete 1 --yes
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    transaction_count = db.get_account_transaction_count(account_id)
    snapshot_count = db.get_account_snapshot_count(account_id)

    if not yes:
        prompt = (
            f"Delete account '{account_obj.name}' (ID: {account_id}) with "
            f"{transaction_count} transaction(s) and {snapshot_count} balance snapshot(s)?"
        )
        if not click.confirm(prompt):
            click.echo("Deletion cancelled.")
            return

    try:
        deleted_txns, deleted_snaps = service.delete_account(account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Deleted account '{account_obj.name}' "
        f"({deleted_txns} transaction(s), {deleted_snaps} balance snapshot(s) removed)"
    )


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
