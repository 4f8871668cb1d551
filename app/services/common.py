"""Shared service helpers: dates, overlap rule and small normalizers."""

from datetime import datetime, date

import pytz

from app.config import Config
from app.exceptions import InvalidDateRangeError


# -------- date helpers --------
def as_date(x, tz_name: str | None = None) -> date:
    """
    Coerce any date-like to a naive date (supports 'YYYY-MM-DD' or ISO with T).
    Timestamps carrying a UTC offset (e.g. '...T21:30:00.000Z') are converted to
    the business timezone first, so they land on the local calendar day.
    Raises InvalidDateRangeError on anything else.
    """
    if isinstance(x, datetime):
        if x.tzinfo is not None:
            x = x.astimezone(pytz.timezone(tz_name or Config.BUSINESS_TIMEZONE))
        return x.date()
    if isinstance(x, date):
        return x
    if isinstance(x, str):
        text = x.strip()
        if "T" in text or " " in text:
            stamp = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
            try:
                return as_date(datetime.fromisoformat(stamp), tz_name)
            except ValueError:
                pass
        base = text.split("T", 1)[0].split(" ", 1)[0]
        try:
            return date.fromisoformat(base)
        except ValueError:
            pass
    raise InvalidDateRangeError(f"Invalid date: {x!r} (expected YYYY-MM-DD)")


def _today(tz_name: str | None = None) -> date:
    """Server-side 'today' in the business timezone. Wrapper for easier testing/mocking."""
    tz = pytz.timezone(tz_name or Config.BUSINESS_TIMEZONE)
    return datetime.now(tz).date()


def overlaps(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """
    Check overlap between [a_start, a_end] and [b_start, b_end], both ends inclusive.
    A booking ending on day N and another starting on day N overlap: the end
    day is still a hire day, so same-day turnover is refused.
    """
    return a_start <= b_end and b_start <= a_end


# -------- validators / normalizers --------
def is_blank(value) -> bool:
    """True for None and for strings that are empty after strip()."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def to_float_safe(value) -> float | None:
    """Safely convert to float; return None if invalid."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _lc(s):
    """Safe lowercase for case-insensitive compare."""
    return (s or "").lower()
