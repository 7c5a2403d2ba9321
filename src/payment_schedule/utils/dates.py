"""Calendar-date helpers.

All functions are total: unparsable input is treated as "not a date"
instead of raising.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def parse_date(value: Any) -> date | None:
    """Parse a ``YYYY-MM-DD`` string (or date/datetime) into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not _ISO_DATE.fullmatch(text):
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        # Well-formed but not a real day, e.g. 2025-02-30
        return None


def is_valid_date(value: Any) -> bool:
    """True iff ``value`` names a real calendar date."""
    return parse_date(value) is not None


def is_date_after(later: Any, earlier: Any) -> bool:
    """Strict chronological comparison; False if either side is invalid."""
    later_date = parse_date(later)
    earlier_date = parse_date(earlier)
    if later_date is None or earlier_date is None:
        return False
    return later_date > earlier_date


def is_valid_future_date(value: Any, today: date | None = None) -> bool:
    """True iff ``value`` is a valid date that is today or later."""
    parsed = parse_date(value)
    if parsed is None:
        return False
    return parsed >= (today or date.today())


def has_duplicate_dates(dates: Iterable[Any]) -> bool:
    """True iff two valid entries fall on the same calendar day."""
    seen: set[date] = set()
    for value in dates:
        parsed = parse_date(value)
        if parsed is None:
            continue
        if parsed in seen:
            return True
        seen.add(parsed)
    return False


def validate_min_date_gap(dates: Iterable[Any], min_days: int) -> bool:
    """True iff chronologically adjacent dates are at least ``min_days`` apart.

    Invalid entries are ignored; fewer than two dates always pass.

    Example:
        ```python
        assert validate_min_date_gap(["2025-01-01", "2025-01-10"], 7) is True
        assert validate_min_date_gap(["2025-01-01", "2025-01-10"], 14) is False
        ```
    """
    ordered = sorted(d for d in (parse_date(value) for value in dates) if d is not None)
    for current, following in zip(ordered, ordered[1:]):
        if (following - current).days < min_days:
            return False
    return True
