"""Balance command."""

import click

from wallit.cli.error_handling import LEDGER_ERRORS, handle_domain_error
from wallit.domain.balance import BalanceService
from wallit.domain.entities import LOCAL_CURRENCY
from wallit.utils.amount_parser import format_money


@click.command("balance")
@click.option("--account", "account_id", help="Show only this account")
@click.option("--history", is_flag=True, help="Show the daily running balance of --account")
@click.pass_context
def balance(ctx, account_id: str | None, history: bool):
    """Show account balances and the total in local currency."""
    if history and not account_id:
        click.echo("Error: --history requires --account", err=True)
        ctx.exit(1)

    service = BalanceService(ctx.obj["db"], rates=ctx.obj["rates"])
    user_id = ctx.obj["user_id"]

    try:
        if account_id:
            result = service.get_account_balance(user_id, account_id)
            click.echo(
                f"{result.account.bank_name} ****{result.account.last_four_digits}: "
                f"{format_money(result.balance, result.account.currency)}"
            )
            if history:
                for point in service.get_balance_history(user_id, account_id):
                    click.echo(f"  {point.date.isoformat()}  {format_money(point.balance, result.account.currency)}")
            return

        balances = service.get_account_balances(user_id)
        if not balances:
            click.echo("No accounts found.")
            return
        for item in balances:
            click.echo(
                f"{item.account.bank_name:20s} ****{item.account.last_four_digits}  "
                f"{format_money(item.balance, item.account.currency):>20s}"
            )
        total = service.get_total_balance(user_id)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)

    click.echo("-" * 50)
    click.echo(f"{'Total':30s} {format_money(total, LOCAL_CURRENCY):>19s}")


def register_commands(cli):
    """Register balance command with main CLI."""
    cli.add_command(balance)
