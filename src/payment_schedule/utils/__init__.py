"""Numeric, date and input helpers."""

from payment_schedule.utils.dates import (
    has_duplicate_dates,
    is_date_after,
    is_valid_date,
    is_valid_future_date,
    parse_date,
    validate_min_date_gap,
)
from payment_schedule.utils.numeric import (
    calculate_percentage,
    format_amount,
    format_percentage,
    round_amount,
    to_decimal,
)
from payment_schedule.utils.io import read_source

__all__ = [
    "parse_date",
    "is_valid_date",
    "is_date_after",
    "is_valid_future_date",
    "has_duplicate_dates",
    "validate_min_date_gap",
    "to_decimal",
    "calculate_percentage",
    "round_amount",
    "format_amount",
    "format_percentage",
    "read_source",
]
