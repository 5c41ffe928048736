"""Utility functions for wallit."""

from wallit.utils.date_parser import parse_date, local_today, utc_now
from wallit.utils.amount_parser import format_money, parse_money, round_half_up
from wallit.utils.ids import generate_id

__all__ = ["parse_date", "local_today", "utc_now", "format_money", "parse_money", "round_half_up", "generate_id"]
