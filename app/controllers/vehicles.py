from flask import Blueprint, jsonify, request

from ..utils.constants import MODULE_VEHICLES
from ..utils.decorators import permission_required, services

bp = Blueprint("vehicles", __name__, url_prefix="/api/vehicles")


@bp.post("")
@permission_required(MODULE_VEHICLES, "create")
def add_vehicle():
    vehicle = services().vehicles.add_vehicle(request.get_json(silent=True) or {})
    return jsonify(success=True, message="Vehicle added successfully", data=vehicle), 201


@bp.get("")
@permission_required(MODULE_VEHICLES, "view")
def list_vehicles():
    """Vehicles list with optional ?make=&min=&max= filters."""
    q = {k: (v or "").strip() for k, v in request.args.items()}
    vehicles = services().vehicles.list_vehicles(
        make=q.get("make") or None,
        min_rate=q.get("min") or None,
        max_rate=q.get("max") or None,
    )
    return jsonify(success=True, count=len(vehicles), data=vehicles)


@bp.get("/<vid>")
@permission_required(MODULE_VEHICLES, "view")
def get_vehicle(vid):
    return jsonify(success=True, data=services().vehicles.get_vehicle(vid))


@bp.get("/<vid>/calendar")
@permission_required(MODULE_VEHICLES, "view")
def vehicle_calendar(vid):
    """Booked (Active) ranges for the vehicle, oldest first."""
    ranges = services().bookings.calendar(vid)
    return jsonify(success=True, data=[{"startDate": s, "endDate": e} for s, e in ranges])


@bp.put("/<vid>")
@permission_required(MODULE_VEHICLES, "edit")
def update_vehicle(vid):
    vehicle = services().vehicles.update_vehicle(vid, request.get_json(silent=True) or {})
    return jsonify(success=True, message="Vehicle updated successfully", data=vehicle)


@bp.delete("/<vid>")
@permission_required(MODULE_VEHICLES, "delete")
def delete_vehicle(vid):
    services().vehicles.delete_vehicle(vid)
    return jsonify(success=True, message="Vehicle deleted successfully")
