"""Field and date checks for booking requests."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from app.exceptions import InvalidDateRangeError, MissingFieldError, PastStartDateError
from app.services.common import as_date, is_blank, _today

REQUIRED_FIELDS = ("clientId", "vehicleId", "startDate", "endDate")


@dataclass(frozen=True)
class ValidatedBooking:
    client_id: str
    vehicle_id: str
    start_date: date
    end_date: date


class BookingValidator:
    """
    Pure validation of a booking request:
      - every field in REQUIRED_FIELDS present and non-blank
      - startDate <= endDate
      - startDate >= today (server clock, day granularity)
    """

    @staticmethod
    def validate(data: dict, today: Optional[date] = None, *, check_past: bool = True) -> ValidatedBooking:
        data = data or {}
        missing = [f for f in REQUIRED_FIELDS if is_blank(data.get(f))]
        if missing:
            raise MissingFieldError(missing)

        start = as_date(data["startDate"])
        end = as_date(data["endDate"])

        if start > end:
            raise InvalidDateRangeError("End date must be on or after start date")

        if check_past:
            today = today or _today()
            if start < today:
                raise PastStartDateError("Start date cannot be in the past")

        return ValidatedBooking(
            client_id=data["clientId"],
            vehicle_id=data["vehicleId"],
            start_date=start,
            end_date=end,
        )
