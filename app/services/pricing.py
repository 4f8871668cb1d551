from dataclasses import dataclass
from datetime import date

from app.services.common import to_float_safe


@dataclass(frozen=True)
class Quote:
    days: int
    total: float

    def to_dict(self) -> dict:
        return {"days": self.days, "total": self.total}


def hire_days(start: date, end: date) -> int:
    """Inclusive calendar-day count; a same-day hire is 1 day."""
    return abs((end - start).days) + 1


def compute_total(start: date, end: date, daily_rate) -> Quote:
    """
    Price a hire: days * daily_rate, no rounding.
    Currency formatting is left to whoever displays the figure.
    """
    rate = to_float_safe(daily_rate)
    if rate is None or rate <= 0:
        raise ValueError(f"daily_rate must be a positive number, got {daily_rate!r}")
    days = hire_days(start, end)
    return Quote(days=days, total=days * rate)
