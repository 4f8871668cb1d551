from flask import Blueprint, jsonify, request

from ..exceptions import MissingFieldError
from ..utils.constants import MODULE_BOOKINGS
from ..utils.decorators import current_role, login_required, permission_required, services

bp = Blueprint("bookings", __name__, url_prefix="/api/bookings")


@bp.get("")
@permission_required(MODULE_BOOKINGS, "view")
def list_bookings():
    """Bookings newest first; ?status=&vehicleId=&clientId= narrow the list."""
    filters = {k: request.args.get(k) for k in ("status", "vehicleId", "clientId")}
    bookings = services().bookings.list_bookings(filters)
    return jsonify(success=True, count=len(bookings), data=bookings)


@bp.get("/availability")
@permission_required(MODULE_BOOKINGS, "view")
def availability():
    vehicle_id = request.args.get("vehicleId")
    start = request.args.get("startDate")
    end = request.args.get("endDate")
    missing = [k for k, v in (("vehicleId", vehicle_id), ("startDate", start), ("endDate", end)) if not v]
    if missing:
        raise MissingFieldError(missing)
    available = services().bookings.check_availability(vehicle_id, start, end)
    return jsonify(success=True, data={"vehicleId": vehicle_id, "startDate": start,
                                       "endDate": end, "available": available})


@bp.get("/<bid>")
@permission_required(MODULE_BOOKINGS, "view")
def get_booking(bid):
    return jsonify(success=True, data=services().bookings.get_booking(bid))


# Mutations: BookingService consults the access policy itself.
@bp.post("")
@login_required
def create_booking():
    booking = services().bookings.create_booking(request.get_json(silent=True) or {}, role=current_role())
    return jsonify(success=True, message="Booking created successfully", data=booking), 201


@bp.put("/<bid>")
@login_required
def update_booking(bid):
    booking = services().bookings.update_booking(bid, request.get_json(silent=True) or {}, role=current_role())
    return jsonify(success=True, message="Booking updated successfully", data=booking)


@bp.patch("/<bid>/status")
@login_required
def change_status(bid):
    body = request.get_json(silent=True) or {}
    if not body.get("status"):
        raise MissingFieldError(["status"])
    booking = services().bookings.change_status(bid, body["status"], role=current_role())
    return jsonify(success=True, message=f"Booking {booking['status'].lower()}", data=booking)


@bp.delete("/<bid>")
@login_required
def delete_booking(bid):
    services().bookings.delete_booking(bid, role=current_role())
    return jsonify(success=True, message="Booking deleted successfully")
