from dataclasses import dataclass
from typing import Optional


@dataclass
class Vehicle:
    """
    Vehicle on the hire fleet. `daily_rate` is the listed price per hire day;
    bookings copy it at creation time, so later edits here do not reprice them.
    """
    id: str
    make: str
    model: str
    year: int
    license_plate: str
    daily_rate: float
    color: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict) -> "Vehicle":
        return cls(
            id=d["id"],
            make=d.get("make", ""),
            model=d.get("model", ""),
            year=int(d.get("year") or 0),
            license_plate=d.get("licensePlate", ""),
            daily_rate=float(d.get("dailyRate") or 0.0),
            color=d.get("color"),
            created_at=d.get("createdAt"),
        )

    def summary(self) -> dict:
        """Short form embedded in booking listings."""
        return {
            "id": self.id,
            "make": self.make,
            "model": self.model,
            "licensePlate": self.license_plate,
            "dailyRate": self.daily_rate,
        }
