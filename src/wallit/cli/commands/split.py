"""Split command."""

import click

from wallit.cli.display import format_movement
from wallit.cli.error_handling import LEDGER_ERRORS, handle_domain_error
from wallit.cli.parsing import parse_amount_arg
from wallit.domain.entities import SplitPart
from wallit.domain.split import SplitService


@click.command("split")
@click.argument("movement_id")
@click.option(
    "--part",
    "parts",
    multiple=True,
    required=True,
    help="NAME=AMOUNT in CLP, repeat once per part",
)
@click.pass_context
def split_movement(ctx, movement_id: str, parts: tuple[str, ...]):
    """Split a movement into parts that add up to its amount.

    Part amounts are in CLP, also for movements entered in USD, and must
    add up to the CLP amount of the movement.

    Examples:
        wallit split abc123 --part "Groceries=60.000" --part "Cleaning=30.000"
    """
    split_parts = []
    for raw in parts:
        name, sep, amount = raw.rpartition("=")
        if not sep or not name.strip():
            click.echo(f"Error: Invalid part '{raw}', expected NAME=AMOUNT", err=True)
            ctx.exit(1)
        split_parts.append(SplitPart(name=name.strip(), amount=parse_amount_arg(ctx, amount, "part amount")))

    service = SplitService(ctx.obj["db"])
    try:
        movements = service.split_movement(ctx.obj["user_id"], movement_id, split_parts)
    except LEDGER_ERRORS as e:
        handle_domain_error(ctx, e)

    click.echo(f"Split movement {movement_id} into {len(movements)} parts:")
    for movement in movements:
        click.echo(f"  {format_movement(movement)}")


def register_commands(cli):
    """Register split command with main CLI."""
    cli.add_command(split_movement)
