"""Exchange rate command."""

import click

from wallit.cli.error_handling import LEDGER_ERRORS, handle_domain_error
from wallit.domain.entities import Currency, LOCAL_CURRENCY
from wallit.utils.amount_parser import format_money


@click.command("rate")
@click.option("--cached", is_flag=True, help="Show the cached rate without fetching")
@click.pass_context
def rate(ctx, cached: bool):
    """Show the USD exchange rate in local currency."""
    rates = ctx.obj["rates"]
    pair = f"{Currency.USD.value}->{LOCAL_CURRENCY.value}"

    if cached:
        entry = rates.get_cached_rate(Currency.USD, LOCAL_CURRENCY)
        if entry is None:
            click.echo("No cached rate.")
            return
        click.echo(
            f"{pair}: {format_money(entry.rate, LOCAL_CURRENCY)} "
            f"(from {entry.source}, {entry.fetched_at:%Y-%m-%d %H:%M} UTC)"
        )
        return

    try:
        value = rates.get_rate(Currency.USD, LOCAL_CURRENCY)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    click.echo(f"{pair}: {format_money(value, LOCAL_CURRENCY)}")


def register_commands(cli):
    """Register rate command with main CLI."""
    cli.add_command(rate)
