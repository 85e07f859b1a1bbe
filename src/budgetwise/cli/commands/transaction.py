"""Transaction management commands."""

import click
from budgetwise.cli.account_resolution import resolve_account_or_exit
from budgetwise.cli.date_filters import (
    collect_period_flags,
    parse_amount_or_exit,
    parse_date_or_exit,
    period_options,
    resolve_cli_date_range,
)
from budgetwise.cli.error_handling import handle_domain_error
from budgetwise.domain.account import AccountService
from budgetwise.domain.transaction import DEFAULT_CATEGORY, TransactionService

TYPE_CHOICE = click.Choice(["income", "expense"], case_sensitive=False)


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--type", "txn_type", type=TYPE_CHOICE, required=True, help="income or expense")
@click.option("--amount", required=True, help="Positive amount (e.g., 42.50)")
@click.option(
    "--date", "txn_date", default="today", help="Transaction date (YYYY-MM-DD or 'today', 'yesterday')"
)
@click.option("--description", default="", help="Transaction description")
@click.option("--category", default=DEFAULT_CATEGORY, show_default=True, help="Category name")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    txn_type: str,
    amount: str,
    txn_date: str,
    description: str,
    category: str,
):
    """Add a transaction.

    Examples:
        budgetwise transaction add --account Checking --type expense --amount 12.50 --category Groceries
        budgetwise transaction add --account 1 --type income --amount 2500 --date 2024-01-31
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    day = parse_date_or_exit(ctx, txn_date)
    value = parse_amount_or_exit(ctx, amount)

    try:
        transaction_id = service.create_transaction(
            account_id=account_id,
            type=txn_type.lower(),
            amount=value,
            date=day,
            description=description,
            category=category,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    account_obj = account_service.get_account(account_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Account: {account_obj.name}")
    click.echo(f"  Date: {day}")
    click.echo(f"  {txn_type.capitalize()}: ${value:,.2f}")
    click.echo(f"  Category: {category}")
    if description:
        click.echo(f"  Description: {description}")


@transaction_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="Only income or only expense")
@click.option("--category", help="Category name")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--limit", type=int, help="Show at most this many transactions")
@period_options
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    txn_type: str | None,
    category: str | None,
    start_date: str | None,
    end_date: str | None,
    limit: int | None,
    **period_kwargs,
):
    """List transactions, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=collect_period_flags(period_kwargs),
    )
    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None

    transactions = service.list_transactions(
        start_date=start,
        end_date=end,
        account_id=account_id,
        type=txn_type.lower() if txn_type else None,
        category=category,
        limit=limit,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':>12} {'Account':<20} {'Category':<20} {'Description':<26}"
    )
    click.echo("-" * 100)
    for txn in transactions:
        amount_str = f"{txn.signed_amount:+,.2f}"
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {amount_str:>12} "
            f"{accounts.get(txn.account_id, 'Unknown')[:20]:<20} {txn.category[:20]:<20} "
            f"{txn.description[:26]:<26}"
        )


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--account", help="Account name or ID")
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="income or expense")
@click.option("--amount", help="Positive amount")
@click.option("--date", "txn_date", help="Transaction date")
@click.option("--description", help="Transaction description")
@click.option("--category", help="Category name")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    account: str | None,
    txn_type: str | None,
    amount: str | None,
    txn_date: str | None,
    description: str | None,
    category: str | None,
):
    """Update a transaction.

    Examples:
        budgetwise transaction update 12 --amount 19.99
        budgetwise transaction update 12 --type income --category Gifts
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = AccountService(db)

    if all(v is None for v in (account, txn_type, amount, txn_date, description, category)):
        click.echo("Error: Nothing to update.", err=True)
        ctx.exit(1)

    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None
    value = parse_amount_or_exit(ctx, amount) if amount is not None else None
    day = parse_date_or_exit(ctx, txn_date) if txn_date is not None else None

    try:
        service.update_transaction(
            transaction_id,
            account_id=account_id,
            type=txn_type.lower() if txn_type else None,
            amount=value,
            date=day,
            description=description,
            category=category,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool):
    """Delete a transaction."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Delete transaction {transaction_id} ({txn.date}, {txn.signed_amount:+,.2f}, {txn.category})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
