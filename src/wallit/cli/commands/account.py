"""Account management commands."""

import click

from wallit.cli.error_handling import LEDGER_ERRORS, handle_domain_error
from wallit.cli.parsing import parse_amount_arg
from wallit.domain.account import AccountService
from wallit.domain.entities import Currency


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("bank_name", metavar="BANK_NAME")
@click.option("--type", "account_type", required=True, help="Account type (e.g. Corriente, Vista, Ahorro)")
@click.option("--last-four", required=True, help="Last 4 digits of the account number")
@click.option(
    "--currency",
    type=click.Choice([c.value for c in Currency], case_sensitive=False),
    default=Currency.CLP.value,
    show_default=True,
    help="Account currency",
)
@click.option("--initial-balance", help="Opening balance (e.g. 150.000 or 1,500.50)")
@click.option("--color", help="Display color")
@click.option("--emoji", help="Display emoji")
@click.pass_context
def create_account(
    ctx,
    bank_name: str,
    account_type: str,
    last_four: str,
    currency: str,
    initial_balance: str | None,
    color: str | None,
    emoji: str | None,
):
    """Create a new account.

    Examples:
        wallit account create "Banco Estado" --type Vista --last-four 1234
        wallit account create "Santander" --type Corriente --last-four 9876 --currency USD
    """
    service = AccountService(ctx.obj["db"])
    balance = parse_amount_arg(ctx, initial_balance, "initial balance") or 0

    try:
        account = service.create_account(
            user_id=ctx.obj["user_id"],
            bank_name=bank_name,
            account_type=account_type,
            last_four_digits=last_four,
            currency=currency.upper(),
            initial_balance=balance,
            color=color,
            emoji=emoji,
        )
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{account.bank_name}' (ID: {account.id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    service = AccountService(ctx.obj["db"])

    try:
        accounts = service.list_accounts(ctx.obj["user_id"])
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        click.echo(
            f"{acc.id} | {acc.bank_name:20s} | {acc.account_type:10s} | "
            f"****{acc.last_four_digits} | {acc.currency.value}"
        )


@account_group.command("delete")
@click.argument("account_id", metavar="ACCOUNT_ID")
@click.pass_context
def delete_account(ctx, account_id: str) -> None:
    """Delete an account.

    Movements of the account are kept but no longer belong to any account.
    """
    service = AccountService(ctx.obj["db"])
    try:
        service.delete_account(ctx.obj["user_id"], account_id)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account {account_id}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
