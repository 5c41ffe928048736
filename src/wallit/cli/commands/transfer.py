"""Transfer commands."""

import click

from wallit.cli.error_handling import LEDGER_ERRORS, handle_domain_error
from wallit.cli.parsing import parse_amount_arg, parse_date_arg
from wallit.domain.entities import Currency, Transfer
from wallit.domain.transfer import TransferService
from wallit.utils.amount_parser import format_money
from wallit.utils.date_parser import local_today

CURRENCY_CHOICE = click.Choice([c.value for c in Currency], case_sensitive=False)


def _service(ctx) -> TransferService:
    return TransferService(ctx.obj["db"], rates=ctx.obj["rates"])


def _echo_transfer(verb: str, transfer: Transfer) -> None:
    out, into = transfer.from_movement, transfer.to_movement
    click.echo(f"{verb} transfer {transfer.transfer_id}")
    click.echo(f"  out: {format_money(out.input_amount, out.currency)} ({out.name})")
    click.echo(f"  in:  {format_money(into.input_amount, into.currency)} ({into.name})")


def _resolve_transfer(ctx, service: TransferService, movement_id: str) -> Transfer:
    try:
        transfer = service.get_transfer(ctx.obj["user_id"], movement_id)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    if transfer is None:
        click.echo(f"Error: Movement {movement_id} is not part of a transfer", err=True)
        ctx.exit(1)
    return transfer


@click.group()
def transfer_group():
    """Move money between your accounts."""
    pass


@transfer_group.command("create")
@click.argument("from_account_id")
@click.argument("to_account_id")
@click.argument("amount")
@click.option("--to-amount", help="Amount received (defaults to AMOUNT converted)")
@click.option("--from-currency", type=CURRENCY_CHOICE, help="Currency of AMOUNT")
@click.option("--to-currency", type=CURRENCY_CHOICE, help="Currency of --to-amount")
@click.option("--date", "date_str", help="Date (defaults to today)")
@click.option("--time", "time_str", help="Time of day (HH:MM)")
@click.option("--note", help="Name for both movements")
@click.pass_context
def create_transfer(
    ctx,
    from_account_id: str,
    to_account_id: str,
    amount: str,
    to_amount: str | None,
    from_currency: str | None,
    to_currency: str | None,
    date_str: str | None,
    time_str: str | None,
    note: str | None,
):
    """Transfer AMOUNT from one account to another.

    Examples:
        wallit transfer create abc123 def456 500.000
        wallit transfer create abc123 usd789 500.000 --to-amount 526,30
    """
    from_value = parse_amount_arg(ctx, amount)
    to_value = parse_amount_arg(ctx, to_amount, "to amount")
    transfer_date = parse_date_arg(ctx, date_str) or local_today(ctx.obj["timezone"])

    try:
        transfer = _service(ctx).create_transfer(
            ctx.obj["user_id"],
            from_account_id=from_account_id,
            to_account_id=to_account_id,
            from_amount=from_value,
            to_amount=to_value,
            date=transfer_date,
            from_currency=from_currency.upper() if from_currency else None,
            to_currency=to_currency.upper() if to_currency else None,
            note=note,
            time=time_str,
        )
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    _echo_transfer("Created", transfer)


@transfer_group.command("edit")
@click.argument("movement_id")
@click.option("--amount", help="New amount sent")
@click.option("--to-amount", help="New amount received")
@click.option("--from-currency", type=CURRENCY_CHOICE, help="Currency of --amount")
@click.option("--to-currency", type=CURRENCY_CHOICE, help="Currency of --to-amount")
@click.option("--date", "date_str", help="New date")
@click.option("--note", help="New name for both movements")
@click.pass_context
def edit_transfer(
    ctx,
    movement_id: str,
    amount: str | None,
    to_amount: str | None,
    from_currency: str | None,
    to_currency: str | None,
    date_str: str | None,
    note: str | None,
):
    """Edit the transfer that MOVEMENT_ID (either leg) belongs to."""
    service = _service(ctx)
    transfer = _resolve_transfer(ctx, service, movement_id)
    out, into = transfer.from_movement, transfer.to_movement

    from_value = parse_amount_arg(ctx, amount)
    to_value = parse_amount_arg(ctx, to_amount, "to amount")
    transfer_date = parse_date_arg(ctx, date_str) or out.date

    try:
        transfer = service.update_transfer(
            ctx.obj["user_id"],
            transfer.transfer_id,
            from_amount=from_value if from_value is not None else out.input_amount,
            to_amount=to_value if to_value is not None else into.input_amount,
            date=transfer_date,
            from_currency=from_currency.upper() if from_currency else out.currency,
            to_currency=to_currency.upper() if to_currency else into.currency,
            note=note,
        )
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    _echo_transfer("Updated", transfer)


@transfer_group.command("delete")
@click.argument("movement_id")
@click.pass_context
def delete_transfer(ctx, movement_id: str):
    """Delete the transfer that MOVEMENT_ID (either leg) belongs to."""
    service = _service(ctx)
    transfer = _resolve_transfer(ctx, service, movement_id)
    try:
        service.delete_transfer(ctx.obj["user_id"], transfer.transfer_id)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transfer {transfer.transfer_id}")


@transfer_group.command("convert")
@click.argument("movement_id")
@click.argument("to_account_id")
@click.option("--to-amount", help="Amount of the paired movement (defaults to the movement's amount)")
@click.option("--to-currency", type=CURRENCY_CHOICE, help="Currency of --to-amount")
@click.option("--note", help="Name for both movements")
@click.pass_context
def convert_to_transfer(
    ctx,
    movement_id: str,
    to_account_id: str,
    to_amount: str | None,
    to_currency: str | None,
    note: str | None,
):
    """Turn an existing movement into a transfer with TO_ACCOUNT_ID."""
    to_value = parse_amount_arg(ctx, to_amount, "to amount")
    try:
        transfer = _service(ctx).convert_to_transfer(
            ctx.obj["user_id"],
            movement_id,
            to_account_id=to_account_id,
            to_amount=to_value,
            to_currency=to_currency.upper() if to_currency else None,
            note=note,
        )
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    _echo_transfer("Created", transfer)


def register_commands(cli):
    """Register transfer commands with main CLI."""
    cli.add_command(transfer_group, name="transfer")
