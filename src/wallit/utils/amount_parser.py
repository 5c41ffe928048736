"""Amount parsing and rounding utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re


def round_half_up(value: Decimal | int | float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's ``round`` uses banker's rounding; money math here must not.
    """
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def parse_money(amount_str: str) -> int:
    """Parse a money string into integer minor units (cents).

    Handles both US and Chilean formats:
    - "15000", "$15000"
    - "15.000", "1.500.000" (dots as thousands separators)
    - "15.50", "15,50" (two decimals)
    - "1.000,50" and "1,000.50"
    - "US$12,50"

    Args:
        amount_str: Amount string

    Returns:
        Amount in minor units

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"US\$|[$€]", "", amount_str).strip()
    if not cleaned:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    has_comma = "," in cleaned
    has_dot = "." in cleaned

    if has_dot and has_comma:
        if cleaned.rfind(",") > cleaned.rfind("."):
            # 1.000,50
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            # 1,000.50
            cleaned = cleaned.replace(",", "")
    elif has_dot:
        parts = cleaned.split(".")
        if len(parts) > 2 or len(parts[1]) == 3:
            cleaned = cleaned.replace(".", "")
    elif has_comma:
        parts = cleaned.split(",")
        if len(parts) == 2 and len(parts[1]) in (1, 2):
            cleaned = cleaned.replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")

    try:
        value = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e
    return round_half_up(value * 100)


def format_money(amount: int, currency: str = "CLP") -> str:
    """Format minor units for display, e.g. 150050 -> "CLP 1,500.50"."""
    value = Decimal(amount) / 100
    code = getattr(currency, "value", currency)
    return f"{code} {value:,.2f}"
