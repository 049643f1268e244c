# This module holds the calendar-date helpers shared by the engine and its boundary modules.
# Override maps are keyed by canonical YYYY-MM-DD strings, so every lookup goes through one normalizer.
# Windows are plain lists of consecutive dates; nothing here knows about timezones.

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

DATE_KEY_FORMAT = "%Y-%m-%d"
_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_date_key(value: str) -> bool:
    if not _DATE_KEY_RE.match(value):
        return False
    try:
        datetime.strptime(value, DATE_KEY_FORMAT)
    except ValueError:
        return False
    return True


def parse_date_key(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not is_date_key(text):
        raise ValueError(f"Use YYYY-MM-DD formatted dates, got: {value!r}")
    return datetime.strptime(text, DATE_KEY_FORMAT).date()


def to_date_key(value: date | str) -> str:
    return parse_date_key(value).strftime(DATE_KEY_FORMAT)


def date_window(start_date: date | str, day_count: int) -> list[date]:
    if day_count <= 0:
        return []
    start = parse_date_key(start_date)
    return [start + timedelta(days=offset) for offset in range(day_count)]
