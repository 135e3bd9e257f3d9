# aqua_bridge/services/sms_provider.py
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import requests

from aqua_bridge.errors import UpstreamFailure

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class SmsProvider:
    def send(self, to: str, body: str) -> str:
        """Deliver body to the phone number and return the provider message id."""
        raise NotImplementedError


def _safe_json(resp: requests.Response) -> Optional[Dict[str, Any]]:
    """
    Return JSON dict if response body is JSON, else None.
    Twilio error pages behind proxies are not always JSON.
    """
    try:
        data = resp.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


class TwilioSmsProvider(SmsProvider):
    """
    Sends plain SMS through the Twilio Messages REST endpoint.
    Any transport error, non-2xx answer or body without a sid is an UpstreamFailure.
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        timeout: int = 15,
        session: Optional[requests.Session] = None,
        api_base: str = TWILIO_API_BASE,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.timeout = timeout
        self.session = session or requests.Session()
        self.url = f"{api_base.rstrip('/')}/Accounts/{account_sid}/Messages.json"

    def send(self, to: str, body: str) -> str:
        payload = {"To": to, "From": self.from_number, "Body": body}
        try:
            resp = self.session.post(
                self.url,
                data=payload,
                auth=(self.account_sid, self.auth_token),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamFailure(f"SMS provider unreachable: {e}") from e

        data = _safe_json(resp)

        if resp.status_code >= 400:
            msg = (data or {}).get("message") or f"HTTP {resp.status_code}"
            raise UpstreamFailure(f"SMS provider rejected message: {msg}")

        if not data or not data.get("sid"):
            raise UpstreamFailure("SMS provider returned no message sid")

        logger.info("SMS queued to %s (sid=%s)", to, data["sid"])
        return data["sid"]


def build_sms_provider(config: Mapping[str, Any]) -> Optional[SmsProvider]:
    """
    Twilio provider when fully configured, else None (codes are echoed back).
    """
    sid = config.get("TWILIO_ACCOUNT_SID")
    token = config.get("TWILIO_AUTH_TOKEN")
    from_number = config.get("TWILIO_PHONE_NUMBER")

    if not (sid and token and from_number):
        logger.warning("Twilio environment variables not fully set. OTP codes will be echoed, not sent.")
        return None

    return TwilioSmsProvider(sid, token, from_number, timeout=int(config.get("SMS_TIMEOUT", 15)))
