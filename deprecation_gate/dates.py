from __future__ import annotations

import datetime as dt
import os
import re

from deprecation_gate.errors import DateFormatError

TODAY_ENV = "DEPRECATION_GATE_TODAY"
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(raw: str) -> dt.date:
    text = str(raw).strip()
    if not DATE_RE.match(text):
        raise DateFormatError(f"invalid date (expected YYYY-MM-DD): {raw!r}")
    try:
        return dt.date.fromisoformat(text)
    except ValueError as exc:
        raise DateFormatError(f"invalid date {raw!r}: {exc}") from exc


def format_date(value: dt.date) -> str:
    return value.isoformat()


def plus_days(value: dt.date, days: int) -> dt.date:
    return value + dt.timedelta(days=days)


def today() -> dt.date:
    """Local calendar date, or the date pinned via DEPRECATION_GATE_TODAY."""
    pinned = os.environ.get(TODAY_ENV, "").strip()
    if pinned:
        return parse_date(pinned)
    return dt.date.today()


def coerce_date(value: dt.date | str | None) -> dt.date:
    if value is None:
        return today()
    # datetime is a date subclass; compare on the calendar day only
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        return parse_date(value)
    raise DateFormatError(f"unsupported date value: {value!r}")
