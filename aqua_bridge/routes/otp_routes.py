# aqua_bridge/routes/otp_routes.py

from flask import Blueprint, jsonify, request

from aqua_bridge.errors import AquaBridgeError
from aqua_bridge.routes.responses import error_response
from aqua_bridge.services.container import get_services

otp_bp = Blueprint("otp", __name__)


# -----------------------------------------
# SEND OTP
# POST /send-otp  {phone}
# -----------------------------------------
@otp_bp.post("/send-otp")
def send_otp():
    data = request.get_json(silent=True)
    data = data if isinstance(data, dict) else {}
    phone = data.get("phone")
    if not phone:
        return jsonify({"success": False, "error": "phone required"}), 400

    try:
        return jsonify(get_services().otp.send_otp(str(phone)))
    except AquaBridgeError as e:
        return error_response(e)


# -----------------------------------------
# VERIFY OTP
# POST /verify-otp  {phone, code}
# -----------------------------------------
@otp_bp.post("/verify-otp")
def verify_otp():
    data = request.get_json(silent=True)
    data = data if isinstance(data, dict) else {}
    phone, code = data.get("phone"), data.get("code")
    if not phone or not code:
        return jsonify({"success": False, "error": "phone and code required"}), 400

    try:
        # success -> a real deployment would issue a session here
        return jsonify(get_services().otp.verify_otp(str(phone), str(code)))
    except AquaBridgeError as e:
        return error_response(e)
