"""Booking lifecycle: create, edit, status changes and deletion."""

from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Callable, Optional

from app.exceptions import (
    InvalidDateRangeError,
    InvalidTransitionError,
    NotFoundError,
    TerminalStateViolationError,
    ValidationError,
    VehicleUnavailableError,
)
from app.models.booking import Booking
from app.models.client import Client
from app.models.vehicle import Vehicle
from app.services.access_policy import AccessPolicy
from app.services.availability import AvailabilityChecker
from app.services.booking_validator import BookingValidator, ValidatedBooking
from app.services.common import as_date, is_blank, _today
from app.services.locks import KeyedLocks, client_key
from app.services.pricing import compute_total
from app.utils.constants import BookingStatus, Collection, MODULE_BOOKINGS
from app.utils.logger import get_logger

log = get_logger(__name__)

# Active is the only state with exits
TRANSITIONS = {
    BookingStatus.ACTIVE: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}

# Permission action needed to move a booking into each status
STATUS_ACTIONS = {
    BookingStatus.COMPLETED: "checkin",
    BookingStatus.CANCELLED: "cancel",
}

EDITABLE_FIELDS = ("clientId", "vehicleId", "startDate", "endDate")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def normalize_status(value) -> str:
    """Map 'completed' / 'COMPLETED' etc. to the canonical status name."""
    wanted = str(value or "").strip().lower()
    for status in BookingStatus.ALL:
        if status.lower() == wanted:
            return status
    raise InvalidTransitionError(f"Unknown booking status: {value!r}")


class BookingService:
    """
    Orchestrates a booking request:
      access policy -> validator -> availability (under vehicle lock) -> pricing -> store.

    The per-vehicle lock is held from the availability check until the write
    lands, so concurrent requests for the same vehicle are serialized.
    """

    def __init__(
            self,
            store,
            policy: Optional[AccessPolicy] = None,
            locks: Optional[KeyedLocks] = None,
            clock: Optional[Callable[[], date]] = None,
    ):
        self.store = store
        self.policy = policy or AccessPolicy()
        self.locks = locks or KeyedLocks()
        self.clock = clock or _today
        self.availability = AvailabilityChecker(store)

    # --------------- lookups ---------------
    def _load(self, booking_id: str) -> dict:
        rec = self.store.find_by_id(Collection.BOOKINGS, booking_id)
        if rec is None:
            raise NotFoundError(f"Booking '{booking_id}' not found")
        return rec

    def _vehicle(self, vehicle_id: str) -> Vehicle:
        rec = self.store.find_by_id(Collection.VEHICLES, vehicle_id)
        if rec is None:
            raise NotFoundError(f"Vehicle '{vehicle_id}' not found")
        return Vehicle.from_dict(rec)

    def _ensure_client(self, client_id: str) -> None:
        if self.store.find_by_id(Collection.CLIENTS, client_id) is None:
            raise NotFoundError(f"Client '{client_id}' not found")

    def _ensure_free(self, v: ValidatedBooking, exclude_booking_id: Optional[str] = None) -> None:
        clashes = self.availability.conflicts(v.vehicle_id, v.start_date, v.end_date, exclude_booking_id)
        if clashes:
            taken = ", ".join(f"{b.start_date} to {b.end_date}" for b in clashes)
            raise VehicleUnavailableError(f"Vehicle is already booked for {taken}")

    @contextmanager
    def _locked_booking(self, booking_id: str, *extra_keys):
        """
        Hold the lock of the booking's current vehicle (plus `extra_keys`) and
        yield a fresh copy of the booking. If an edit moved the booking to
        another vehicle before the lock was taken, release and retry.
        """
        while True:
            vehicle_id = self._load(booking_id)["vehicleId"]
            with self.locks.hold(vehicle_id, *extra_keys):
                current = self._load(booking_id)
                if current["vehicleId"] == vehicle_id:
                    yield current
                    return
            log.debug("Booking %s moved off vehicle %s while locking; retrying", booking_id, vehicle_id)

    def _populate(self, rec: dict) -> dict:
        """Attach client/vehicle summaries, like a populated listing."""
        out = dict(rec)
        client = self.store.find_by_id(Collection.CLIENTS, rec.get("clientId"))
        vehicle = self.store.find_by_id(Collection.VEHICLES, rec.get("vehicleId"))
        out["client"] = Client.from_dict(client).summary() if client else None
        out["vehicle"] = Vehicle.from_dict(vehicle).summary() if vehicle else None
        return out

    def get_booking(self, booking_id: str) -> dict:
        return self._populate(self._load(booking_id))

    def list_bookings(self, filters: Optional[dict] = None) -> list[dict]:
        """All bookings matching the equality `filters`, newest first."""
        wanted = {k: v for k, v in (filters or {}).items() if v not in (None, "")}
        if "status" in wanted:
            try:
                wanted["status"] = normalize_status(wanted["status"])
            except InvalidTransitionError:
                raise ValidationError(f"Unknown booking status filter: {wanted['status']!r}") from None
        records = self.store.find(Collection.BOOKINGS, wanted)
        records.sort(key=lambda r: r.get("createdAt") or "", reverse=True)
        return [self._populate(r) for r in records]

    # --------------- queries ---------------
    def check_availability(self, vehicle_id: str, start, end) -> bool:
        """True when no Active booking of the vehicle overlaps [start, end]."""
        start, end = as_date(start), as_date(end)
        if start > end:
            raise InvalidDateRangeError("End date must be on or after start date")
        return self.availability.is_available(str(vehicle_id), start, end)

    def calendar(self, vehicle_id: str):
        self._vehicle(vehicle_id)
        return self.availability.calendar(vehicle_id)

    # --------------- commands ---------------
    def create_booking(self, data: dict, role: Optional[str] = None) -> dict:
        """Validate, check availability, price and persist a new Active booking."""
        self.policy.require(role, MODULE_BOOKINGS, "create")
        v = BookingValidator.validate(data, today=self.clock())
        v = ValidatedBooking(str(v.client_id), str(v.vehicle_id), v.start_date, v.end_date)
        with self.locks.hold(v.vehicle_id, client_key(v.client_id)):
            self._ensure_client(v.client_id)
            vehicle = self._vehicle(v.vehicle_id)
            self._ensure_free(v)
            quote = compute_total(v.start_date, v.end_date, vehicle.daily_rate)
            rec = self.store.insert(Collection.BOOKINGS, {
                "clientId": v.client_id,
                "vehicleId": v.vehicle_id,
                "startDate": v.start_date.isoformat(),
                "endDate": v.end_date.isoformat(),
                "status": BookingStatus.ACTIVE,
                "days": quote.days,
                "dailyRate": vehicle.daily_rate,
                "total": quote.total,
            })

        log.info("Booking %s created: vehicle=%s %s..%s total=%s",
                 rec["id"], v.vehicle_id, rec["startDate"], rec["endDate"], quote.total)
        return self._populate(rec)

    def update_booking(self, booking_id: str, patch: dict, role: Optional[str] = None) -> dict:
        """
        Edit client, vehicle or dates of an Active booking.
        Status is not editable here; use change_status().
        """
        self.policy.require(role, MODULE_BOOKINGS, "edit")
        patch = dict(patch or {})
        current = self._load(booking_id)

        if "status" in patch:
            if normalize_status(patch.pop("status")) != current.get("status"):
                raise InvalidTransitionError("Booking status cannot be changed by an edit; use the status action")

        changes = {k: patch[k] for k in EDITABLE_FIELDS if k in patch}
        extra_keys = []
        if not is_blank(changes.get("vehicleId")):
            extra_keys.append(str(changes["vehicleId"]))
        if not is_blank(changes.get("clientId")):
            extra_keys.append(client_key(changes["clientId"]))

        with self._locked_booking(booking_id, *extra_keys) as current:
            if Booking.from_dict(current).is_terminal:
                raise TerminalStateViolationError(f"Booking is {current['status']} and can no longer be edited")

            merged = {k: current.get(k) for k in EDITABLE_FIELDS}
            merged.update(changes)
            start_changed = ("startDate" in changes and not is_blank(changes["startDate"])
                             and as_date(changes["startDate"]).isoformat() != current["startDate"])
            v = BookingValidator.validate(merged, today=self.clock(), check_past=start_changed)
            v = ValidatedBooking(str(v.client_id), str(v.vehicle_id), v.start_date, v.end_date)

            updates = {
                "clientId": v.client_id,
                "vehicleId": v.vehicle_id,
                "startDate": v.start_date.isoformat(),
                "endDate": v.end_date.isoformat(),
            }
            if updates == {k: current.get(k) for k in EDITABLE_FIELDS}:
                return self._populate(current)

            if v.client_id != current["clientId"]:
                self._ensure_client(v.client_id)

            if (v.vehicle_id, updates["startDate"], updates["endDate"]) != \
                    (current["vehicleId"], current["startDate"], current["endDate"]):
                vehicle = self._vehicle(v.vehicle_id)
                self._ensure_free(v, exclude_booking_id=booking_id)
                quote = compute_total(v.start_date, v.end_date, vehicle.daily_rate)
                updates.update(days=quote.days, dailyRate=vehicle.daily_rate, total=quote.total)

            rec = self.store.update_by_id(Collection.BOOKINGS, booking_id, updates)

        log.info("Booking %s updated: %s", booking_id, sorted(changes))
        return self._populate(rec)

    def change_status(self, booking_id: str, new_status, role: Optional[str] = None) -> dict:
        """Apply a state-machine transition (Active -> Completed | Cancelled)."""
        target = normalize_status(new_status)
        self.policy.require(role, MODULE_BOOKINGS, STATUS_ACTIONS.get(target, "edit"))

        with self._locked_booking(booking_id) as current:
            status = current.get("status")
            if status in BookingStatus.TERMINAL:
                raise TerminalStateViolationError(f"Booking is already {status}")
            if target not in TRANSITIONS.get(status, set()):
                raise InvalidTransitionError(f"Cannot move booking from {status} to {target}")

            stamp = "completedAt" if target == BookingStatus.COMPLETED else "cancelledAt"
            rec = self.store.update_by_id(Collection.BOOKINGS, booking_id, {"status": target, stamp: _now_iso()})

        log.info("Booking %s: %s -> %s", booking_id, status, target)
        return self._populate(rec)

    def complete_booking(self, booking_id: str, role: Optional[str] = None) -> dict:
        return self.change_status(booking_id, BookingStatus.COMPLETED, role)

    def cancel_booking(self, booking_id: str, role: Optional[str] = None) -> dict:
        return self.change_status(booking_id, BookingStatus.CANCELLED, role)

    def delete_booking(self, booking_id: str, role: Optional[str] = None) -> bool:
        """Remove a booking in any status."""
        self.policy.require(role, MODULE_BOOKINGS, "delete")
        with self._locked_booking(booking_id):
            if not self.store.delete_by_id(Collection.BOOKINGS, booking_id):
                raise NotFoundError(f"Booking '{booking_id}' not found")
        log.info("Booking %s deleted", booking_id)
        return True
