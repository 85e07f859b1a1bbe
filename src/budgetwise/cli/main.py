"""Main CLI entry point."""

import click
from budgetwise.database.factories import create_sqlite_database
from budgetwise.logging_config import LOG_LEVELS, setup_logging

# Import and register all commands at module level
from budgetwise.cli.commands import (
    account,
    balance,
    category,
    chart,
    summary,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BUDGETWISE_DB_PATH environment variable)",
    envvar="BUDGETWISE_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="BUDGETWISE_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """BudgetWise - Personal finance tracker.

    Record accounts, transactions and known balances, and see how every
    account's balance evolved over time.
    """
    ctx.ensure_object(dict)
    setup_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
transaction.register_commands(cli)
balance.register_commands(cli)
category.register_commands(cli)
summary.register_commands(cli)
chart.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
