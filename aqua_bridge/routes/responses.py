# aqua_bridge/routes/responses.py

from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from aqua_bridge.errors import AquaBridgeError


def error_response(e: Exception):
    """
    Known errors keep their message and status; anything else is logged
    and answered with a generic 500 envelope.
    """
    if isinstance(e, AquaBridgeError):
        if e.status_code >= 500:
            current_app.logger.error("%s: %s", type(e).__name__, e.message)
        return jsonify(e.to_dict()), e.status_code

    if isinstance(e, HTTPException):
        return jsonify({"success": False, "error": e.description}), e.code

    current_app.logger.exception("Unhandled error: %s", e)
    return jsonify({"success": False, "error": "Server error"}), 500
