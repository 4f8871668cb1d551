"""Vehicle availability against Active bookings."""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Tuple

from app.models.booking import Booking
from app.services.common import overlaps
from app.utils.constants import BookingStatus, Collection


class AvailabilityChecker:
    """Read-only queries over the bookings collection."""

    def __init__(self, store):
        self.store = store

    def _active_bookings(self, vehicle_id: str, exclude_booking_id: Optional[str] = None) -> List[Booking]:
        records = self.store.find(
            Collection.BOOKINGS,
            {"vehicleId": str(vehicle_id), "status": BookingStatus.ACTIVE},
        )
        return [Booking.from_dict(r) for r in records if r.get("id") != exclude_booking_id]

    def conflicts(self, vehicle_id: str, start: date, end: date,
                  exclude_booking_id: Optional[str] = None) -> List[Booking]:
        """Active bookings of this vehicle whose range overlaps [start, end]."""
        return [
            b for b in self._active_bookings(vehicle_id, exclude_booking_id)
            if overlaps(start, end, b.start_date, b.end_date)
        ]

    def is_available(self, vehicle_id: str, start: date, end: date,
                     exclude_booking_id: Optional[str] = None) -> bool:
        return not self.conflicts(vehicle_id, start, end, exclude_booking_id)

    def calendar(self, vehicle_id: str) -> List[Tuple[str, str]]:
        """
        Return (start, end) ISO strings for the vehicle's Active bookings.
        Used by the UI to disable booked dates.
        """
        ranges = [(b.start_date.isoformat(), b.end_date.isoformat())
                  for b in self._active_bookings(vehicle_id)]
        ranges.sort(key=lambda t: t[0])
        return ranges
