# aqua_bridge/errors.py
from __future__ import annotations


class AquaBridgeError(Exception):
    """Base error. Routes turn it into {"success": False, "error": message}."""

    status_code = 500

    def __init__(self, message: str = "Server error", status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"success": False, "error": self.message}


class ValidationError(AquaBridgeError):
    status_code = 400


class NotFound(AquaBridgeError):
    status_code = 404


class OtpNotFound(NotFound):
    # the login screen expects 400 for an unknown phone, not 404
    status_code = 400


class Expired(AquaBridgeError):
    status_code = 400


class Mismatch(AquaBridgeError):
    status_code = 400


class UpstreamFailure(AquaBridgeError):
    status_code = 500


class NetworkFailure(AquaBridgeError):
    """Client side: the remote API could not be used."""

    status_code = None  # HTTP status when the server did answer

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message, status_code)
        self.body = body
