"""
BookingService: creation, edits, the Active -> Completed/Cancelled state machine,
pinned pricing, deletion and access checks.
"""

import pytest

from app.exceptions import (
    InvalidDateRangeError,
    InvalidTransitionError,
    MissingFieldError,
    NotFoundError,
    PastStartDateError,
    PermissionDeniedError,
    TerminalStateViolationError,
    VehicleUnavailableError,
)
from conftest import day

DIRECTOR = "director"


def request(hirer, vehicle, start, end):
    return {"clientId": hirer["id"], "vehicleId": vehicle["id"], "startDate": start, "endDate": end}


# ---------------- create ----------------
def test_create_pins_price(bookings, hirer, make_vehicle):
    v = make_vehicle(rate=5000)
    b = bookings.create_booking(request(hirer, v, day(10), day(12)), role=DIRECTOR)
    assert b["status"] == "Active"
    assert (b["days"], b["dailyRate"], b["total"]) == (3, 5000.0, 15000.0)
    assert b["client"]["fullName"] == hirer["fullName"]
    assert b["vehicle"]["licensePlate"] == v["licensePlate"]


def test_overlap_scenario_with_shared_boundary_day(bookings, hirer, make_vehicle):
    v = make_vehicle(rate=5000)
    bookings.create_booking(request(hirer, v, day(10), day(12)), role=DIRECTOR)

    with pytest.raises(VehicleUnavailableError):
        bookings.create_booking(request(hirer, v, day(11), day(13)), role=DIRECTOR)

    # day 12 is the first booking's last hire day, so it is still taken
    with pytest.raises(VehicleUnavailableError):
        bookings.create_booking(request(hirer, v, day(12), day(15)), role=DIRECTOR)

    ok = bookings.create_booking(request(hirer, v, day(13), day(15)), role=DIRECTOR)
    assert ok["days"] == 3
    assert len(bookings.list_bookings({"vehicleId": v["id"]})) == 2


def test_rejected_request_creates_nothing(bookings, store, hirer, vehicle):
    with pytest.raises(PastStartDateError):
        bookings.create_booking(request(hirer, vehicle, day(-1), day(2)), role=DIRECTOR)
    with pytest.raises(InvalidDateRangeError):
        bookings.create_booking(request(hirer, vehicle, day(5), day(2)), role=DIRECTOR)
    with pytest.raises(MissingFieldError):
        bookings.create_booking({"clientId": hirer["id"]}, role=DIRECTOR)
    assert store.find("bookings") == []


def test_unknown_references_rejected(bookings, hirer, vehicle):
    with pytest.raises(NotFoundError):
        bookings.create_booking(request({"id": "nope"}, vehicle, day(1), day(2)), role=DIRECTOR)
    with pytest.raises(NotFoundError):
        bookings.create_booking(request(hirer, {"id": "nope"}, day(1), day(2)), role=DIRECTOR)


def test_rate_change_does_not_reprice_existing_booking(bookings, store, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
    store.update_by_id("vehicles", vehicle["id"], {"dailyRate": 9999.0})
    bookings.complete_booking(b["id"], role=DIRECTOR)

    again = bookings.get_booking(b["id"])
    assert again["total"] == 10000.0
    assert again["dailyRate"] == 5000.0


# ---------------- status ----------------
def test_complete_then_cancel_is_refused(bookings, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
    done = bookings.change_status(b["id"], "Completed", role=DIRECTOR)
    assert done["status"] == "Completed"
    assert done["completedAt"]

    with pytest.raises(TerminalStateViolationError):
        bookings.change_status(b["id"], "Cancelled", role=DIRECTOR)


def test_terminal_booking_cannot_return_to_active(bookings, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
    bookings.change_status(b["id"], "completed", role=DIRECTOR)
    with pytest.raises(TerminalStateViolationError):
        bookings.change_status(b["id"], "Active", role=DIRECTOR)


def test_active_to_active_is_invalid(bookings, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
    with pytest.raises(InvalidTransitionError):
        bookings.change_status(b["id"], "Active", role=DIRECTOR)


def test_unknown_status_is_invalid(bookings, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
    with pytest.raises(InvalidTransitionError):
        bookings.change_status(b["id"], "Archived", role=DIRECTOR)


def test_status_change_on_missing_booking(bookings):
    with pytest.raises(NotFoundError):
        bookings.change_status("missing", "Cancelled", role=DIRECTOR)


def test_cancel_frees_the_dates(bookings, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(3), day(5)), role=DIRECTOR)
    assert not bookings.check_availability(vehicle["id"], day(4), day(4))
    bookings.cancel_booking(b["id"], role=DIRECTOR)
    assert bookings.check_availability(vehicle["id"], day(4), day(4))


# ---------------- update ----------------
def test_update_dates_reprices_and_skips_itself(bookings, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
    updated = bookings.update_booking(b["id"], {"endDate": day(4)}, role=DIRECTOR)
    assert (updated["days"], updated["total"]) == (4, 20000.0)


def test_update_into_other_booking_refused(bookings, hirer, vehicle):
    bookings.create_booking(request(hirer, vehicle, day(10), day(12)), role=DIRECTOR)
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
    with pytest.raises(VehicleUnavailableError):
        bookings.update_booking(b["id"], {"endDate": day(10)}, role=DIRECTOR)
    assert bookings.get_booking(b["id"])["endDate"] == day(2)


def test_update_vehicle_uses_new_rate(bookings, hirer, vehicle, make_vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
    other = make_vehicle(rate=1000)
    updated = bookings.update_booking(b["id"], {"vehicleId": other["id"]}, role=DIRECTOR)
    assert updated["vehicleId"] == other["id"]
    assert updated["total"] == 2000.0
    assert bookings.check_availability(vehicle["id"], day(1), day(2))


def test_update_client_only_keeps_price(bookings, store, hirer, vehicle, make_client):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
    store.update_by_id("vehicles", vehicle["id"], {"dailyRate": 1.0})
    other = make_client()
    updated = bookings.update_booking(b["id"], {"clientId": other["id"]}, role=DIRECTOR)
    assert updated["clientId"] == other["id"]
    assert updated["total"] == 10000.0


def test_update_cannot_change_status(bookings, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
    with pytest.raises(InvalidTransitionError):
        bookings.update_booking(b["id"], {"status": "Completed"}, role=DIRECTOR)


def test_update_of_closed_booking_refused(bookings, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
    bookings.cancel_booking(b["id"], role=DIRECTOR)
    with pytest.raises(TerminalStateViolationError):
        bookings.update_booking(b["id"], {"endDate": day(3)}, role=DIRECTOR)


def test_update_missing_booking(bookings):
    with pytest.raises(NotFoundError):
        bookings.update_booking("missing", {"endDate": day(3)}, role=DIRECTOR)


# ---------------- delete ----------------
def test_delete_cancelled_booking_reopens_vehicle(bookings, store, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(10), day(12)), role=DIRECTOR)
    bookings.cancel_booking(b["id"], role=DIRECTOR)
    assert bookings.delete_booking(b["id"], role=DIRECTOR) is True
    assert store.find_by_id("bookings", b["id"]) is None

    again = bookings.create_booking(request(hirer, vehicle, day(11), day(13)), role=DIRECTOR)
    assert again["status"] == "Active"


def test_delete_active_booking_allowed(bookings, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
    assert bookings.delete_booking(b["id"], role=DIRECTOR)
    assert bookings.check_availability(vehicle["id"], day(1), day(2))


def test_delete_missing_booking(bookings):
    with pytest.raises(NotFoundError):
        bookings.delete_booking("missing", role=DIRECTOR)


# ---------------- access policy ----------------
def test_owner_cannot_create(bookings, hirer, vehicle):
    with pytest.raises(PermissionDeniedError):
        bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role="owner")


def test_anonymous_cannot_create(bookings, hirer, vehicle):
    with pytest.raises(PermissionDeniedError):
        bookings.create_booking(request(hirer, vehicle, day(1), day(2)))


def test_staff_cannot_delete_but_can_cancel(bookings, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role="staff")
    with pytest.raises(PermissionDeniedError):
        bookings.delete_booking(b["id"], role="staff")
    assert bookings.cancel_booking(b["id"], role="staff")["status"] == "Cancelled"


def test_client_role_cannot_complete(bookings, hirer, vehicle):
    b = bookings.create_booking(request(hirer, vehicle, day(1), day(2)), role="client")
    with pytest.raises(PermissionDeniedError):
        bookings.complete_booking(b["id"], role="client")


def test_injected_policy_is_used(store, hirer, vehicle):
    from app.services.access_policy import AccessPolicy
    from app.services.booking_service import BookingService
    from conftest import TODAY

    locked_down = BookingService(store, AccessPolicy({"director": {"bookings": ["view"]}}), clock=lambda: TODAY)
    with pytest.raises(PermissionDeniedError):
        locked_down.create_booking(request(hirer, vehicle, day(1), day(2)), role=DIRECTOR)
