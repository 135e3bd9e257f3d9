# aqua_bridge/services/otp_store.py
from __future__ import annotations

from typing import Dict, Optional

from pymongo.errors import PyMongoError

from aqua_bridge.errors import UpstreamFailure
from aqua_bridge.models.otp_models import OtpEntry


class OtpStore:
    """Phone -> pending OTP entry. At most one live entry per phone."""

    def get(self, phone: str) -> Optional[OtpEntry]:
        raise NotImplementedError

    def set(self, entry: OtpEntry) -> None:
        raise NotImplementedError

    def delete(self, phone: str) -> None:
        raise NotImplementedError


class InMemoryOtpStore(OtpStore):
    """Process-local store. Fine for tests and a single worker."""

    def __init__(self) -> None:
        self._entries: Dict[str, OtpEntry] = {}

    def get(self, phone: str) -> Optional[OtpEntry]:
        return self._entries.get(phone)

    def set(self, entry: OtpEntry) -> None:
        self._entries[entry.phone] = entry

    def delete(self, phone: str) -> None:
        self._entries.pop(phone, None)


class MongoOtpStore(OtpStore):
    """
    Shared store for multi-worker deployments (OTP_STORE=mongo).
    One document per phone in the otp_codes collection.
    """

    def __init__(self, collection) -> None:
        self._col = collection

    def get(self, phone: str) -> Optional[OtpEntry]:
        try:
            doc = self._col.find_one({"phone": phone}, {"_id": 0})
        except PyMongoError as e:
            raise UpstreamFailure(f"OTP store unavailable: {e}") from e
        return OtpEntry(**doc) if doc else None

    def set(self, entry: OtpEntry) -> None:
        try:
            self._col.update_one({"phone": entry.phone}, {"$set": entry.model_dump()}, upsert=True)
        except PyMongoError as e:
            raise UpstreamFailure(f"OTP store unavailable: {e}") from e

    def delete(self, phone: str) -> None:
        try:
            self._col.delete_one({"phone": phone})
        except PyMongoError as e:
            raise UpstreamFailure(f"OTP store unavailable: {e}") from e
