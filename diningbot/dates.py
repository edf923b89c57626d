"""Formatting and parsing of dates in the M/D/YYYY form used by the menu site."""

import re
from datetime import date

_DATE_RE = re.compile(r"([0-9]{1,2})/([0-9]{1,2})/([0-9]{4})")


def format_date(value: date) -> str:
    """Format a date or datetime as M/D/YYYY without leading zeros."""
    return f"{value.month}/{value.day}/{value.year:04d}"


def parse_date(text: str) -> date:
    """Parse an M/D/YYYY string into a date, raising ValueError if malformed."""
    match = _DATE_RE.fullmatch(text)
    if match is None:
        raise ValueError(f"invalid date {text!r}: expected M/D/YYYY")
    month, day, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise ValueError(f"invalid date {text!r}: {exc}") from None