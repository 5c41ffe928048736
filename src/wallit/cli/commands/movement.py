"""Movement management commands."""

import click

from wallit.cli.display import format_movement
from wallit.cli.error_handling import LEDGER_ERRORS, handle_domain_error
from wallit.cli.parsing import parse_amount_arg, parse_date_arg
from wallit.domain.entities import Currency, MovementType
from wallit.domain.movement import DEFAULT_PAGE_SIZE, MovementService
from wallit.utils.date_parser import local_today

CURRENCY_CHOICE = click.Choice([c.value for c in Currency], case_sensitive=False)
TYPE_CHOICE = click.Choice([t.value for t in MovementType], case_sensitive=False)


def _service(ctx) -> MovementService:
    return MovementService(ctx.obj["db"], rates=ctx.obj["rates"])


@click.group()
def movement_group():
    """Manage movements (expenses and income)."""
    pass


@movement_group.command("add")
@click.argument("name")
@click.argument("amount")
@click.option("--account", "account_id", required=True, help="Account ID")
@click.option("--type", "movement_type", type=TYPE_CHOICE, default="expense", show_default=True)
@click.option("--date", "date_str", help="Date (YYYY-MM-DD or 'today', 'yesterday'); defaults to today")
@click.option("--time", "time_str", help="Time of day (HH:MM)")
@click.option("--currency", type=CURRENCY_CHOICE, help="Currency of AMOUNT (defaults to the account currency)")
@click.option("--category", "category_id", help="Category ID")
@click.option("--review", is_flag=True, help="Put the movement in the review queue")
@click.pass_context
def add_movement(
    ctx,
    name: str,
    amount: str,
    account_id: str,
    movement_type: str,
    date_str: str | None,
    time_str: str | None,
    currency: str | None,
    category_id: str | None,
    review: bool,
):
    """Add a movement.

    Examples:
        wallit movement add "Supermercado" 15.990 --account abc123
        wallit movement add "Salary" 1.500.000 --account abc123 --type income
        wallit movement add "Netflix" 15,49 --account abc123 --currency USD
    """
    value = parse_amount_arg(ctx, amount)
    movement_date = parse_date_arg(ctx, date_str) or local_today(ctx.obj["timezone"])

    try:
        movement = _service(ctx).create_movement(
            user_id=ctx.obj["user_id"],
            name=name,
            date=movement_date,
            amount=value,
            type=movement_type.lower(),
            account_id=account_id,
            currency=currency.upper() if currency else None,
            category_id=category_id,
            time=time_str,
            needs_review=review,
        )
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created movement {movement.id}")


@movement_group.command("list")
@click.option("--account", "account_id", help="Only movements of this account")
@click.option("--pending", is_flag=True, help="Only movements waiting for review")
@click.option("--receivables", is_flag=True, help="Only receivables")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative)")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative)")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--page-size", type=int, default=DEFAULT_PAGE_SIZE, show_default=True)
@click.pass_context
def list_movements(
    ctx,
    account_id: str | None,
    pending: bool,
    receivables: bool,
    start_date: str | None,
    end_date: str | None,
    page: int,
    page_size: int,
):
    """List movements, newest first."""
    start = parse_date_arg(ctx, start_date, "start date")
    end = parse_date_arg(ctx, end_date, "end date")

    try:
        result = _service(ctx).list_movements(
            ctx.obj["user_id"],
            account_id=account_id,
            needs_review=True if pending else None,
            receivable=True if receivables else None,
            start_date=start,
            end_date=end,
            page=page,
            page_size=page_size,
        )
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)

    if not result.items:
        click.echo("No movements found.")
        return
    for movement in result.items:
        click.echo(format_movement(movement))
    click.echo(f"\nPage {result.page} ({len(result.items)} of {result.total} movements)")
    if result.has_next:
        click.echo(f"Next page: --page {result.page + 1}")


@movement_group.command("edit")
@click.argument("movement_id")
@click.option("--name", help="New name")
@click.option("--amount", help="New amount")
@click.option("--currency", type=CURRENCY_CHOICE, help="Currency of the amount")
@click.option("--type", "movement_type", type=TYPE_CHOICE, help="New type")
@click.option("--date", "date_str", help="New date")
@click.option("--time", "time_str", help="New time of day (HH:MM)")
@click.option("--account", "account_id", help="Move to this account")
@click.option("--category", help="Category ID, or empty string to clear")
@click.pass_context
def edit_movement(
    ctx,
    movement_id: str,
    name: str | None,
    amount: str | None,
    currency: str | None,
    movement_type: str | None,
    date_str: str | None,
    time_str: str | None,
    account_id: str | None,
    category: str | None,
):
    """Edit a movement. Only the given fields change.

    Use --category "" to clear the category.
    """
    try:
        movement = _service(ctx).update_movement(
            ctx.obj["user_id"],
            movement_id,
            name=name,
            date=parse_date_arg(ctx, date_str),
            time=time_str,
            amount=parse_amount_arg(ctx, amount),
            currency=currency.upper() if currency else None,
            type=movement_type.lower() if movement_type else None,
            account_id=account_id,
            category_id=category or None,
            clear_category=category == "",
        )
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated movement {movement.id}")


@movement_group.command("delete")
@click.argument("movement_id")
@click.pass_context
def delete_movement(ctx, movement_id: str):
    """Delete a movement. Deleting a transfer leg deletes the whole transfer."""
    try:
        _service(ctx).delete_movement(ctx.obj["user_id"], movement_id)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted movement {movement_id}")


@movement_group.command("confirm")
@click.argument("movement_id")
@click.option("--name", help="Rename while confirming")
@click.option("--category", "category_id", help="Categorize while confirming")
@click.pass_context
def confirm_movement(ctx, movement_id: str, name: str | None, category_id: str | None):
    """Confirm a movement from the review queue."""
    service = _service(ctx)
    try:
        service.confirm_movement(ctx.obj["user_id"], movement_id, name=name, category_id=category_id)
        remaining = service.pending_review_count(ctx.obj["user_id"])
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)
    click.echo(f"Confirmed movement {movement_id} ({remaining} left to review)")


def register_commands(cli):
    """Register movement commands with main CLI."""
    cli.add_command(movement_group, name="movement")
