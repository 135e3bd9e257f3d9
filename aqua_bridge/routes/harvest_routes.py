# aqua_bridge/routes/harvest_routes.py

from flask import Blueprint, jsonify, request

from aqua_bridge.errors import AquaBridgeError
from aqua_bridge.routes.responses import error_response
from aqua_bridge.services.container import get_services

harvest_bp = Blueprint("harvest_requests", __name__, url_prefix="/harvest-requests")


# ---------------------------------------------------
# SUBMIT (farmer)
# POST /harvest-requests  {farmerId, grade, quantity, location, ...}
# ---------------------------------------------------
@harvest_bp.post("")
def submit_harvest_request():
    try:
        created = get_services().harvest.submit_request(request.get_json(silent=True))
        return jsonify({"success": True, "request": created}), 201
    except AquaBridgeError as e:
        return error_response(e)


# ---------------------------------------------------
# LIST (newest first, optional ?farmerId=)
# ---------------------------------------------------
@harvest_bp.get("")
def list_harvest_requests():
    farmer_id = request.args.get("farmerId") or None
    try:
        requests_ = get_services().harvest.list_requests(farmer_id)
        return jsonify({"success": True, "requests": requests_})
    except AquaBridgeError as e:
        return error_response(e)


# ---------------------------------------------------
# STATUS TRANSITION (admin)
# PATCH /harvest-requests/<request_id>  {status}
# ---------------------------------------------------
@harvest_bp.patch("/<request_id>")
def update_harvest_request(request_id):
    try:
        updated = get_services().harvest.update_status(request_id, request.get_json(silent=True))
        return jsonify({"success": True, "request": updated})
    except AquaBridgeError as e:
        return error_response(e)
