"""Receivable commands."""

import click

from wallit.cli.display import format_movement
from wallit.cli.error_handling import LEDGER_ERRORS, handle_domain_error
from wallit.domain.receivable import ReceivableService


def _service(ctx) -> ReceivableService:
    return ReceivableService(ctx.obj["db"], rates=ctx.obj["rates"], timezone=ctx.obj["timezone"])


@click.group()
def receivable_group():
    """Track money other people owe you."""
    pass


@receivable_group.command("mark")
@click.argument("movement_id")
@click.option("--reminder", help="Rename the movement to a reminder (e.g. 'Juan owes half')")
@click.pass_context
def mark(ctx, movement_id: str, reminder: str | None):
    """Mark a movement as a receivable."""
    try:
        movement = _service(ctx).mark_receivable(ctx.obj["user_id"], movement_id, reminder_text=reminder)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    click.echo(f"Marked '{movement.name}' as receivable")


@receivable_group.command("unmark")
@click.argument("movement_id")
@click.pass_context
def unmark(ctx, movement_id: str):
    """Remove the receivable flag and delete any linked payment."""
    try:
        _service(ctx).unmark_receivable(ctx.obj["user_id"], movement_id)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    click.echo(f"Movement {movement_id} is no longer a receivable")


@receivable_group.command("receive")
@click.argument("movement_id")
@click.option("--account", "account_id", help="Record a new payment into this account")
@click.option("--income", "income_id", help="Link an existing income movement as the payment")
@click.pass_context
def receive(ctx, movement_id: str, account_id: str | None, income_id: str | None):
    """Mark a receivable as received.

    Without options the receivable is settled without any payment movement
    (e.g. paid in cash).
    """
    if account_id and income_id:
        click.echo("Error: --account and --income cannot be combined", err=True)
        ctx.exit(1)

    service = _service(ctx)
    user_id = ctx.obj["user_id"]
    try:
        if income_id:
            payment = service.mark_as_received_with_existing(user_id, movement_id, income_id)
        else:
            payment = service.mark_as_received(user_id, movement_id, account_id=account_id)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)

    if payment is None:
        click.echo(f"Receivable {movement_id} marked as received")
    else:
        click.echo(f"Receivable {movement_id} received with payment {payment.id}")


@receivable_group.command("list")
@click.option("--all", "include_received", is_flag=True, help="Include receivables already received")
@click.pass_context
def list_receivables(ctx, include_received: bool):
    """List receivables."""
    try:
        receivables = _service(ctx).list_receivables(ctx.obj["user_id"], include_received=include_received)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    if not receivables:
        click.echo("No receivables found.")
        return
    for movement in receivables:
        click.echo(format_movement(movement))


def register_commands(cli):
    """Register receivable commands with main CLI."""
    cli.add_command(receivable_group, name="receivable")
