# aqua_bridge/services/market_service.py

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from aqua_bridge.errors import ValidationError
from aqua_bridge.models.harvest_models import ShrimpGrade
from aqua_bridge.models.market_models import MarketStatusUpdateModel, PriceUpdateModel, default_prices
from aqua_bridge.services.document_store import DocumentStore

logger = logging.getLogger(__name__)

MARKET_STATUS_KEY = "market_status"

GRADE_ORDER = {g.value: i for i, g in enumerate(ShrimpGrade)}


class MarketService:
    """
    Market open/closed flag and per-grade prices.
    An absent status document reads as open.
    """

    def __init__(self, store: DocumentStore, prices_collection: str = "market_prices"):
        self.store = store
        self.prices_collection = prices_collection

    # ---------------------------------------------------------
    # STATUS
    # ---------------------------------------------------------
    def get_status(self) -> bool:
        return self.store.get_flag(MARKET_STATUS_KEY, default=True)

    def set_status(self, payload: Optional[Dict[str, Any]]) -> bool:
        try:
            model = MarketStatusUpdateModel(**(payload if isinstance(payload, dict) else {}))
        except PydanticValidationError as e:
            raise ValidationError("isOpen must be a boolean") from e

        status = self.store.set_flag(MARKET_STATUS_KEY, model.isOpen)
        logger.info("Market %s", "opened" if status else "closed")
        return status

    # ---------------------------------------------------------
    # PRICES
    # ---------------------------------------------------------
    def _ensure_seeded(self) -> None:
        if self.store.count(self.prices_collection) == 0:
            seeded = self.store.insert_many(self.prices_collection, default_prices())
            logger.info("Seeded %d default market prices", len(seeded))

    def list_prices(self) -> List[Dict[str, Any]]:
        self._ensure_seeded()
        prices = self.store.find(self.prices_collection)

        return sorted(prices, key=lambda p: GRADE_ORDER.get(p.get("grade"), len(GRADE_ORDER)))

    def update_price(self, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        try:
            model = PriceUpdateModel(**(payload if isinstance(payload, dict) else {}))
        except PydanticValidationError as e:
            raise ValidationError("Invalid payload") from e

        self._ensure_seeded()
        existing = self.store.find_one(self.prices_collection, {"grade": model.grade})
        previous = existing.get("price") if existing else None

        updated = {
            "grade": model.grade,
            "price": model.price,
            "previousPrice": previous,
            "updatedAt": datetime.now(timezone.utc).isoformat(),
        }
        self.store.upsert(self.prices_collection, {"grade": model.grade}, updated)
        logger.info("Price for %s: %s -> %s", model.grade, previous, model.price)
        return updated
