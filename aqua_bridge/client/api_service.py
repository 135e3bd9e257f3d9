# aqua_bridge/client/api_service.py
from __future__ import annotations

import logging
import os
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

import requests

from aqua_bridge.client.local_store import LocalStore
from aqua_bridge.errors import NetworkFailure, NotFound
from aqua_bridge.models.harvest_models import HarvestStatus

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "http://localhost:5000"
DEFAULT_TIMEOUT = int(os.getenv("AQUA_BRIDGE_API_TIMEOUT", "10"))
FALLBACK_DELAY = 0.4  # seconds; emulates network latency for local answers


def _value(v: Any) -> Any:
    # accept enums or plain strings for grade / status
    return getattr(v, "value", v)


def _safe_json(resp: requests.Response) -> Optional[Any]:
    """Parsed body, or None when the body is not JSON (HTML error pages etc.)."""
    try:
        return resp.json()
    except ValueError:
        return None


class ApiService:
    """
    Client for the Aqua Bridge API.

    Every market / harvest call tries the remote API first and falls back to
    the LocalStore when:
      - no base URL is configured (no network call at all)
      - the request fails at the transport level
      - the server answers non-2xx
      - the body is not JSON or lacks the expected envelope field
    If the fallback itself raises, the original NetworkFailure is raised.

    OTP calls have no local fallback; failures raise NetworkFailure with the
    server's error message.
    """

    def __init__(
        self,
        base_url: Optional[str] = DEFAULT_API_BASE,
        local_store: Optional[LocalStore] = None,
        session: Optional[requests.Session] = None,
        fallback_delay: float = FALLBACK_DELAY,
        timeout: int = DEFAULT_TIMEOUT,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.local = local_store if local_store is not None else LocalStore()
        self.session = session or requests.Session()
        self.fallback_delay = fallback_delay
        self.timeout = timeout
        self._sleep = sleep

    @classmethod
    def from_env(cls, **kwargs) -> "ApiService":
        """
        AQUA_BRIDGE_API_BASE_URL (or legacy AQUA_BRIDGE_API_BASE) picks the server;
        AQUA_BRIDGE_LOCAL_STORE is the JSON file used when it is unreachable.
        """
        base = os.getenv("AQUA_BRIDGE_API_BASE_URL") or os.getenv("AQUA_BRIDGE_API_BASE") or DEFAULT_API_BASE
        kwargs.setdefault("local_store", LocalStore(os.getenv("AQUA_BRIDGE_LOCAL_STORE") or None))
        return cls(base, **kwargs)

    # ------- network helper with fallback -------

    def _url(self, path: str) -> str:
        if path.startswith("http"):
            return path
        return f"{self.base_url}{'' if path.startswith('/') else '/'}{path}"

    def _fallback_or_raise(self, fallback: Optional[Callable[[], Any]], err: NetworkFailure) -> Any:
        if fallback is None:
            raise err

        logger.info("Using local fallback: %s", err.message)
        try:
            result = fallback()
        except Exception as fb_err:
            logger.warning("Local fallback failed: %s", fb_err)
            raise err from fb_err

        if self.fallback_delay:
            self._sleep(self.fallback_delay)
        return result

    def _try_fetch(
        self,
        path: str,
        field: Optional[str],
        method: str = "GET",
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
        fallback: Optional[Callable[[], Any]] = None,
    ) -> Any:
        """
        Returns envelope[field] from the server (the whole envelope when field
        is None) or whatever fallback() returns.
        """
        if not self.base_url:
            msg = "No API base configured" + ("" if fallback else " and no fallback provided.")
            return self._fallback_or_raise(fallback, NetworkFailure(msg))

        url = self._url(path)

        try:
            resp = self.session.request(method, url, json=json, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            return self._fallback_or_raise(fallback, NetworkFailure(f"Network error on {url}: {e}"))

        data = _safe_json(resp)

        if not resp.ok:
            server_msg = data.get("error") if isinstance(data, dict) else None
            snippet = (resp.text or "").strip().replace("\n", " ")[:240]
            msg = server_msg or f"Request failed: {resp.status_code} {resp.reason or ''} {snippet}".strip()
            err = NetworkFailure(msg, status_code=resp.status_code, body=snippet)
            return self._fallback_or_raise(fallback, err)

        if not isinstance(data, dict) or (field is not None and field not in data):
            err = NetworkFailure(f"Unexpected response from {url}", status_code=resp.status_code)
            return self._fallback_or_raise(fallback, err)

        return data if field is None else data[field]

    # ------- OTP (no fallback) -------

    def send_otp(self, phone: str) -> Dict[str, Any]:
        return self._try_fetch("/send-otp", None, "POST", json={"phone": phone})

    def verify_otp(self, phone: str, code: str) -> bool:
        data = self._try_fetch("/verify-otp", None, "POST", json={"phone": phone, "code": str(code).strip()})
        return bool(data.get("success"))

    # ------- market status & prices -------

    def get_market_status(self) -> bool:
        return bool(self._try_fetch("/market-status", "status", fallback=self.local.get_market_status))

    def update_market_status(self, is_open: bool) -> bool:
        return bool(
            self._try_fetch(
                "/market-status",
                "status",
                "POST",
                json={"isOpen": bool(is_open)},
                fallback=lambda: self.local.set_market_status(is_open),
            )
        )

    def get_market_prices(self) -> List[Dict[str, Any]]:
        return self._try_fetch("/market-prices", "prices", fallback=self.local.get_prices)

    def update_market_price(self, grade, new_price: float) -> Dict[str, Any]:
        grade = _value(grade)
        return self._try_fetch(
            "/market-prices",
            "price",
            "PATCH",
            json={"grade": grade, "price": new_price},
            fallback=lambda: self._local_update_price(grade, new_price),
        )

    def _local_update_price(self, grade: str, new_price: float) -> Dict[str, Any]:
        prices = self.local.get_prices()
        idx = next((i for i, p in enumerate(prices) if p.get("grade") == grade), None)
        if idx is None:
            raise NotFound("Price for grade not found")

        updated = {
            **prices[idx],
            "price": new_price,
            "previousPrice": prices[idx].get("price"),
            "updatedAt": datetime.now(timezone.utc).isoformat(),
        }
        prices[idx] = updated
        self.local.save_prices(prices)
        return updated

    # ------- harvest requests (farmer / admin) -------

    def submit_harvest_request(self, request_data: Dict[str, Any]) -> Dict[str, Any]:
        payload = {k: _value(v) for k, v in (request_data or {}).items()}
        return self._try_fetch(
            "/harvest-requests",
            "request",
            "POST",
            json=payload,
            fallback=lambda: self._local_submit(payload),
        )

    def _local_submit(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        db = self.local.get_requests()
        new_request = {
            **payload,
            "id": f"req_{uuid.uuid4().hex}",
            "status": HarvestStatus.PENDING.value,
            "timestamp": int(time.time() * 1000),
        }
        db.append(new_request)
        self.local.save_requests(db)
        return new_request

    def get_harvest_requests_for_user(self, farmer_id: str) -> List[Dict[str, Any]]:
        def local():
            rows = [r for r in self.local.get_requests() if r.get("farmerId") == farmer_id]
            return sorted(rows, key=lambda r: r.get("timestamp", 0), reverse=True)

        return self._try_fetch("/harvest-requests", "requests", params={"farmerId": farmer_id}, fallback=local)

    def get_all_harvest_requests(self) -> List[Dict[str, Any]]:
        def local():
            return sorted(self.local.get_requests(), key=lambda r: r.get("timestamp", 0), reverse=True)

        return self._try_fetch("/harvest-requests", "requests", fallback=local)

    def update_harvest_request_status(self, request_id: str, new_status) -> Dict[str, Any]:
        new_status = _value(new_status)
        return self._try_fetch(
            f"/harvest-requests/{quote(str(request_id), safe='')}",
            "request",
            "PATCH",
            json={"status": new_status},
            fallback=lambda: self._local_update_status(request_id, new_status),
        )

    def _local_update_status(self, request_id: str, new_status: str) -> Dict[str, Any]:
        db = self.local.get_requests()
        idx = next((i for i, r in enumerate(db) if r.get("id") == request_id), None)
        if idx is None:
            raise NotFound("Request not found")

        db[idx] = {**db[idx], "status": new_status}
        self.local.save_requests(db)
        return db[idx]
