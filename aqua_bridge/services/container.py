# aqua_bridge/services/container.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import current_app

from aqua_bridge.services.document_store import DocumentStore
from aqua_bridge.services.harvest_service import HarvestService
from aqua_bridge.services.market_service import MarketService
from aqua_bridge.services.otp_service import OtpService
from aqua_bridge.services.otp_store import InMemoryOtpStore, MongoOtpStore, OtpStore
from aqua_bridge.services.sms_provider import SmsProvider, build_sms_provider

EXTENSION_KEY = "aqua_bridge"


@dataclass
class Services:
    documents: DocumentStore
    otp: OtpService
    harvest: HarvestService
    market: MarketService


def build_services(app, db, otp_store: Optional[OtpStore] = None, sms_provider: Optional[SmsProvider] = None) -> Services:
    """
    Wire the services for one app. Anything passed in wins over config,
    which is how tests swap in mongomock / fake providers.
    """
    cfg = app.config
    documents = DocumentStore(db, meta_collection=cfg["META_COLLECTION"])

    if otp_store is None:
        if cfg["OTP_STORE"] == "mongo" and db is not None:
            otp_store = MongoOtpStore(db[cfg["OTP_COLLECTION"]])
        else:
            otp_store = InMemoryOtpStore()

    if sms_provider is None:
        sms_provider = build_sms_provider(cfg)

    otp = OtpService(
        otp_store,
        sms_provider,
        ttl_seconds=cfg["OTP_TTL_SECONDS"],
        rollback_on_delivery_failure=cfg["OTP_ROLLBACK_ON_DELIVERY_FAILURE"],
        default_country_code=cfg["DEFAULT_COUNTRY_CODE"],
    )

    services = Services(
        documents=documents,
        otp=otp,
        harvest=HarvestService(documents, collection=cfg["HARVEST_COLLECTION"]),
        market=MarketService(documents, prices_collection=cfg["PRICES_COLLECTION"]),
    )
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
