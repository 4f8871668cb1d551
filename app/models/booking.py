from dataclasses import dataclass
from datetime import date
from typing import Optional

from app.utils.constants import BookingStatus


@dataclass
class Booking:
    """
    A hire of one vehicle by one client over an inclusive date range.
    The booking references the client and vehicle by id only. `days`,
    `daily_rate` and `total` are pinned when the booking is priced.
    """
    id: str
    client_id: str
    vehicle_id: str
    start_date: date
    end_date: date
    status: str = BookingStatus.ACTIVE
    days: int = 0
    daily_rate: float = 0.0
    total: float = 0.0
    created_at: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in BookingStatus.TERMINAL

    @classmethod
    def from_dict(cls, d: dict) -> "Booking":
        return cls(
            id=d["id"],
            client_id=d["clientId"],
            vehicle_id=d["vehicleId"],
            start_date=date.fromisoformat(d["startDate"]),
            end_date=date.fromisoformat(d["endDate"]),
            status=d.get("status", BookingStatus.ACTIVE),
            days=int(d.get("days") or 0),
            daily_rate=float(d.get("dailyRate") or 0.0),
            total=float(d.get("total") or 0.0),
            created_at=d.get("createdAt"),
        )
