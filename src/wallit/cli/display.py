"""CLI helpers for rendering ledger rows."""

from wallit.domain.entities import Movement
from wallit.utils.amount_parser import format_money


def movement_flags(movement: Movement) -> str:
    flags = []
    if movement.needs_review:
        flags.append("review")
    if movement.is_transfer:
        flags.append("transfer")
    if movement.receivable:
        flags.append("received" if movement.received else "receivable")
    if movement.receivable_id is not None:
        flags.append("payment")
    return f" [{', '.join(flags)}]" if flags else ""


def format_movement(movement: Movement) -> str:
    """One-line summary of a movement, amount shown in its input currency."""
    sign = "+" if movement.type.value == "income" else "-"
    amount = format_money(movement.input_amount, movement.currency)
    return (
        f"{movement.id} | {movement.date.isoformat()} | {sign}{amount:>18s} | "
        f"{movement.name}{movement_flags(movement)}"
    )
