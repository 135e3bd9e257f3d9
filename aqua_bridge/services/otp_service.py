# aqua_bridge/services/otp_service.py
from __future__ import annotations

import logging
import re
import secrets
import time
from typing import Any, Callable, Dict, Optional

from aqua_bridge.errors import Expired, Mismatch, OtpNotFound, UpstreamFailure, ValidationError
from aqua_bridge.models.otp_models import OtpEntry
from aqua_bridge.services.otp_store import OtpStore
from aqua_bridge.services.sms_provider import SmsProvider

logger = logging.getLogger(__name__)

OTP_TTL_SECONDS = 300  # 5 minutes
MESSAGE_TEMPLATE = "Your AquaBridge verification code is {code}"


def normalize_phone(raw: str, default_country_code: str = "91") -> str:
    """
    Bring user-typed numbers to E.164-ish form:
      "98765 43210"    -> "+919876543210"
      "919876543210"   -> "+919876543210"
      "+1 555 010 9999" -> "+15550109999"
    """
    cleaned = re.sub(r"\s+", "", raw or "")
    digits = re.sub(r"\D", "", cleaned)
    if len(digits) < 10:
        raise ValidationError("Please enter a valid phone number (10 digits).")

    if cleaned.startswith("+"):
        return "+" + digits
    if len(digits) == 10:
        return f"+{default_country_code}{digits}"
    return f"+{digits}"


def generate_code() -> str:
    return str(100000 + secrets.randbelow(900000))


class OtpService:
    """
    Generate / store / expire / compare.

    Lifecycle per phone:
        NoEntry -> Pending (send) -> Verified | Expired | Pending (resend replaces)
    Wrong codes do not consume the entry; only success or expiry does.
    """

    def __init__(
        self,
        store: OtpStore,
        sms_provider: Optional[SmsProvider] = None,
        ttl_seconds: int = OTP_TTL_SECONDS,
        rollback_on_delivery_failure: bool = False,
        default_country_code: str = "91",
        clock: Callable[[], float] = time.time,
        code_factory: Callable[[], str] = generate_code,
    ):
        self.store = store
        self.sms_provider = sms_provider
        self.ttl_seconds = ttl_seconds
        self.rollback_on_delivery_failure = rollback_on_delivery_failure
        self.default_country_code = default_country_code
        self.clock = clock
        self.code_factory = code_factory

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def normalize(self, phone: str) -> str:
        return normalize_phone(phone, self.default_country_code)

    # ---------------------------------------------------------
    # SEND
    # ---------------------------------------------------------
    def send_otp(self, phone: str) -> Dict[str, Any]:
        phone = self.normalize(phone)
        code = self.code_factory()
        entry = OtpEntry(phone=phone, code=code, expiresAt=self._now_ms() + self.ttl_seconds * 1000)

        # stored before delivery: a failed send leaves the code valid
        # unless rollback is switched on
        self.store.set(entry)

        if self.sms_provider is None:
            logger.info("OTP for %s generated (not sent, no SMS provider): %s", phone, code)
            return {
                "success": True,
                "message": "OTP generated (not sent - SMS provider not configured)",
                "code": code,
            }

        try:
            sid = self.sms_provider.send(phone, MESSAGE_TEMPLATE.format(code=code))
        except UpstreamFailure as e:
            logger.exception("OTP delivery to %s failed", phone)
            if self.rollback_on_delivery_failure:
                self.store.delete(phone)
            raise UpstreamFailure("Failed to send SMS") from e

        return {"success": True, "sid": sid}

    # ---------------------------------------------------------
    # VERIFY
    # ---------------------------------------------------------
    def verify_otp(self, phone: str, code: str) -> Dict[str, Any]:
        phone = self.normalize(phone)
        entry = self.store.get(phone)
        if entry is None:
            raise OtpNotFound("No code found")

        if entry.is_expired(self._now_ms()):
            self.store.delete(phone)
            logger.info("OTP for %s expired", phone)
            raise Expired("Code expired")

        if not secrets.compare_digest(entry.code.encode(), str(code).strip().encode()):
            raise Mismatch("Invalid code")

        self.store.delete(phone)
        return {"success": True, "status": "approved", "message": "Verified"}
