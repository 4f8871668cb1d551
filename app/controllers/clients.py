from flask import Blueprint, jsonify, request

from ..utils.constants import MODULE_CLIENTS
from ..utils.decorators import permission_required, services

bp = Blueprint("clients", __name__, url_prefix="/api/clients")


@bp.post("")
@permission_required(MODULE_CLIENTS, "create")
def add_client():
    client = services().clients.add_client(request.get_json(silent=True) or {})
    return jsonify(success=True, message="Client added successfully", data=client), 201


@bp.get("")
@permission_required(MODULE_CLIENTS, "view")
def list_clients():
    clients = services().clients.list_clients()
    return jsonify(success=True, count=len(clients), data=clients)


@bp.get("/<cid>")
@permission_required(MODULE_CLIENTS, "view")
def get_client(cid):
    return jsonify(success=True, data=services().clients.get_client(cid))


@bp.put("/<cid>")
@permission_required(MODULE_CLIENTS, "edit")
def update_client(cid):
    client = services().clients.update_client(cid, request.get_json(silent=True) or {})
    return jsonify(success=True, message="Client updated successfully", data=client)


@bp.delete("/<cid>")
@permission_required(MODULE_CLIENTS, "delete")
def delete_client(cid):
    services().clients.delete_client(cid)
    return jsonify(success=True, message="Client deleted successfully")
