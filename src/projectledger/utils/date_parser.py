"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

_DAYS_AGO = re.compile(r"^(\d+)\s+days?\s+ago$")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Accepts absolute dates ("2024-01-15", "Jan 15 2024", "2024.01.15") and a
    few relative forms: "today", "yesterday", "tomorrow", "N days ago",
    "this month", "last month", "this year".

    Raises:
        ValueError: If the string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    days_ago = _DAYS_AGO.match(text)
    if days_ago:
        return today - timedelta(days=int(days_ago.group(1)))

    try:
        return date_parser.parse(text.replace(".", "-")).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_optional_date(date_str: Optional[str]) -> Optional[date]:
    """Parse a date string, passing None and blank strings through as None."""
    if date_str is None or not date_str.strip():
        return None
    return parse_date(date_str)
