"""Main CLI entry point."""

import click

from wallit.config import Settings
from wallit.database.factories import create_sqlite_database
from wallit.domain.exchange_rate import ExchangeRateService, OpenErApiRateSource
from wallit.logging_setup import configure_logging

# Import and register all commands at module level
from wallit.cli.commands import (
    account,
    category,
    movement,
    transfer,
    receivable,
    split,
    balance,
    rate,
    report,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides WALLIT_DB_PATH environment variable)",
    envvar="WALLIT_DB_PATH",
)
@click.option(
    "--user",
    "user_id",
    help="Current user ID (overrides WALLIT_USER environment variable)",
    envvar="WALLIT_USER",
)
@click.option(
    "--log-level",
    help="Logging level (overrides WALLIT_LOG_LEVEL environment variable)",
    envvar="WALLIT_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, user_id: str | None, log_level: str | None):
    """Wallit - Personal ledger.

    Track bank accounts, expenses and income, transfers between accounts and
    money other people owe you, in Chilean pesos and US dollars.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is None:
        return

    settings = Settings.from_env()
    if "db" not in ctx.obj:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
    if "rates" not in ctx.obj:
        ctx.obj["rates"] = ExchangeRateService(
            ctx.obj["db"], source=OpenErApiRateSource(settings.rate_api_url)
        )
    ctx.obj.setdefault("timezone", settings.timezone)
    if user_id is not None:
        ctx.obj["user_id"] = user_id
    ctx.obj.setdefault("user_id", None)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
movement.register_commands(cli)
transfer.register_commands(cli)
receivable.register_commands(cli)
split.register_commands(cli)
balance.register_commands(cli)
rate.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
