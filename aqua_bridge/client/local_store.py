# aqua_bridge/client/local_store.py
from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional

from aqua_bridge.models.market_models import default_prices

# Storage keys (same names the web frontend uses in localStorage)
DB_KEY = "aqua_bridge_harvest_requests"
PRICES_DB_KEY = "aqua_bridge_market_prices"
MARKET_STATUS_DB_KEY = "aqua_bridge_market_status"


class LocalStore:
    """
    String key -> JSON string, persisted as one JSON file.
    path=None keeps everything in memory (tests, throwaway sessions).
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._items: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path or not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}

    def _save(self) -> None:
        if not self.path:
            return
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        tmp = f"{self.path}.tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(self._items, f, indent=2)
        os.replace(tmp, self.path)

    # ------- raw key/value -------

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._save()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._save()

    # ------- harvest requests -------

    def get_requests(self) -> List[Dict[str, Any]]:
        raw = self.get_item(DB_KEY)
        return json.loads(raw) if raw else []

    def save_requests(self, requests: List[Dict[str, Any]]) -> None:
        self.set_item(DB_KEY, json.dumps(requests))

    # ------- market prices (seeded on first access) -------

    def get_prices(self) -> List[Dict[str, Any]]:
        raw = self.get_item(PRICES_DB_KEY)
        if raw:
            return json.loads(raw)
        prices = default_prices()
        self.save_prices(prices)
        return prices

    def save_prices(self, prices: List[Dict[str, Any]]) -> None:
        self.set_item(PRICES_DB_KEY, json.dumps(prices))

    # ------- market status (absent = open) -------

    def get_market_status(self) -> bool:
        raw = self.get_item(MARKET_STATUS_DB_KEY)
        return bool(json.loads(raw)) if raw is not None else True

    def set_market_status(self, is_open: bool) -> bool:
        self.set_item(MARKET_STATUS_DB_KEY, json.dumps(bool(is_open)))
        return bool(is_open)
