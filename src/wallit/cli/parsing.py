"""CLI helpers for amount and date arguments."""

from datetime import date
from typing import Optional

import click

from wallit.utils.amount_parser import parse_money
from wallit.utils.date_parser import local_today, parse_date


def parse_amount_arg(ctx: click.Context, value: Optional[str], label: str = "amount") -> Optional[int]:
    """Parse a money string into minor units, exiting on bad input."""
    if value is None:
        return None
    try:
        return parse_money(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_date_arg(ctx: click.Context, value: Optional[str], label: str = "date") -> Optional[date]:
    """Parse a date string relative to today in the configured timezone."""
    if value is None:
        return None
    try:
        return parse_date(value, today=local_today(ctx.obj.get("timezone")))
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)
