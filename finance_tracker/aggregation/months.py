"""
Month Keys

A month key is the "YYYY-MM" string that buckets income, savings and the
selected month. These helpers convert between keys and dates and step
through the calendar, wrapping year boundaries.
"""

import re
from datetime import date
from typing import Optional

from finance_tracker.models.records import MONTH_KEY_PATTERN


_MONTH_KEY_RE = re.compile(MONTH_KEY_PATTERN)


def parse_month_key(month: str) -> tuple[int, int]:
    """Split a month key into (year, month); raises ValueError if malformed."""
    if not isinstance(month, str) or not _MONTH_KEY_RE.match(month):
        raise ValueError(f"Invalid month key: {month!r}. Expected YYYY-MM")
    year, month_number = month.split("-")
    return int(year), int(month_number)


def month_key_of(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def current_month_key(today: Optional[date] = None) -> str:
    return month_key_of(today or date.today())


def first_day_of_month(month: str) -> date:
    year, month_number = parse_month_key(month)
    return date(year, month_number, 1)


def shift_month(month: str, months: int) -> str:
    """Move a month key forward (or backward, for negative ``months``)."""
    year, month_number = parse_month_key(month)
    year, index = divmod(year * 12 + (month_number - 1) + months, 12)
    return f"{year:04d}-{index + 1:02d}"


def next_month_key(month: str) -> str:
    return shift_month(month, 1)


def previous_month_key(month: str) -> str:
    return shift_month(month, -1)


def month_label(month: str) -> str:
    """Human label for a month key, e.g. 'May 2024'."""
    return first_day_of_month(month).strftime("%B %Y")
