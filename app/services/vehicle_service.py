from __future__ import annotations

from app.exceptions import (
    DuplicateRecordError,
    MissingFieldError,
    NotFoundError,
    ReferenceInUseError,
    ValidationError,
)
from app.services.common import is_blank, to_float_safe, _lc
from app.services.locks import KeyedLocks
from app.utils.constants import BookingStatus, Collection
from app.utils.logger import get_logger

log = get_logger(__name__)

REQUIRED = ("make", "model", "year", "licensePlate", "dailyRate")


class VehicleService:
    """Vehicle catalogue: filter, create, edit, delete."""

    def __init__(self, store, locks: KeyedLocks | None = None):
        self.store = store
        self.locks = locks or KeyedLocks()

    @staticmethod
    def _clean(data: dict) -> dict:
        """Normalize the editable fields present in `data`."""
        out = {}
        for key in ("make", "model", "color"):
            if key in data:
                out[key] = (data.get(key) or "").strip() or None
        if "licensePlate" in data:
            out["licensePlate"] = (data.get("licensePlate") or "").strip().upper()
        if "year" in data:
            try:
                out["year"] = int(data["year"])
            except (TypeError, ValueError):
                raise ValidationError("Year must be a whole number") from None
        if "dailyRate" in data:
            rate = to_float_safe(data["dailyRate"])
            if rate is None or rate <= 0:
                raise ValidationError("Daily rate must be a positive number")
            out["dailyRate"] = rate
        return out

    def _check_plate(self, plate: str | None, exclude_id: str | None = None) -> None:
        if not plate:
            return
        for other in self.store.find(Collection.VEHICLES, {"licensePlate": plate}):
            if other["id"] != exclude_id:
                raise DuplicateRecordError("Vehicle already exists with this license plate")

    def add_vehicle(self, data: dict) -> dict:
        data = data or {}
        missing = [f for f in REQUIRED if is_blank(data.get(f))]
        if missing:
            raise MissingFieldError(missing)

        fields = self._clean({**data, "color": data.get("color")})
        self._check_plate(fields["licensePlate"])
        rec = self.store.insert(Collection.VEHICLES, fields)
        log.info("Vehicle %s added (%s %s, %s/day)", rec["id"], rec["make"], rec["model"], rec["dailyRate"])
        return rec

    def list_vehicles(self, make=None, min_rate=None, max_rate=None) -> list[dict]:
        """
        Vehicles newest first, optionally filtered by make/model keyword
        (case-insensitive, partial) and daily-rate range. Invalid bounds are ignored.
        """
        res = self.store.find(Collection.VEHICLES)

        kw = _lc(make).strip()
        if kw:
            res = [v for v in res if kw in _lc(v.get("make")) or kw in _lc(v.get("model"))]

        lo, hi = to_float_safe(min_rate), to_float_safe(max_rate)
        if lo is not None and hi is not None and lo > hi:
            lo, hi = hi, lo
        if lo is not None:
            res = [v for v in res if v.get("dailyRate", 0) >= lo]
        if hi is not None:
            res = [v for v in res if v.get("dailyRate", 0) <= hi]

        res.sort(key=lambda v: v.get("createdAt") or "", reverse=True)
        return res

    def get_vehicle(self, vehicle_id: str) -> dict:
        """Return a vehicle dict by ID or raise NotFoundError."""
        rec = self.store.find_by_id(Collection.VEHICLES, vehicle_id)
        if rec is None:
            raise NotFoundError(f"Vehicle with ID '{vehicle_id}' not found")
        return rec

    def update_vehicle(self, vehicle_id: str, data: dict) -> dict:
        """
        Edit a vehicle. A new dailyRate applies to future bookings only;
        existing bookings keep the rate pinned when they were made.
        """
        self.get_vehicle(vehicle_id)
        fields = self._clean(data or {})
        blank = [f for f in ("make", "model", "licensePlate") if f in fields and not fields[f]]
        if blank:
            raise MissingFieldError(blank)
        self._check_plate(fields.get("licensePlate"), exclude_id=vehicle_id)
        return self.store.update_by_id(Collection.VEHICLES, vehicle_id, fields)

    def delete_vehicle(self, vehicle_id: str) -> bool:
        """
        Delete a vehicle if no Active booking references it. Holds the vehicle's
        booking lock so no booking can be created between the check and the delete.
        """
        with self.locks.hold(vehicle_id):
            self.get_vehicle(vehicle_id)
            if self.store.find(Collection.BOOKINGS, {"vehicleId": vehicle_id, "status": BookingStatus.ACTIVE}):
                raise ReferenceInUseError("Cannot delete: active bookings exist")
            self.store.delete_by_id(Collection.VEHICLES, vehicle_id)
        log.info("Vehicle %s deleted", vehicle_id)
        return True
