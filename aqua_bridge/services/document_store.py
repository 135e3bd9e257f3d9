# aqua_bridge/services/document_store.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from aqua_bridge.errors import NotFound, UpstreamFailure

logger = logging.getLogger(__name__)

# never leak Mongo's ObjectId to JSON responses
NO_ID = {"_id": 0}


def _db_error(e: PyMongoError) -> UpstreamFailure:
    logger.error("Mongo operation failed: %s", e)
    return UpstreamFailure("Server error")


class DocumentStore:
    """
    Thin pass-through over a pymongo Database.
    Ordering comes from the query (timestamp desc), nothing is cached here.
    """

    def __init__(self, db, meta_collection: str = "app_meta"):
        self.db = db
        self.meta_collection = meta_collection

    def _col(self, name: str):
        if self.db is None:
            raise UpstreamFailure("Database not configured")
        return self.db[name]

    # ---------------------------------------------------------
    # GENERIC CRUD
    # ---------------------------------------------------------
    def insert(self, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
        try:
            # insert_one adds _id to the dict it is given; keep the caller's copy clean
            self._col(collection).insert_one(dict(doc))
        except PyMongoError as e:
            raise _db_error(e) from e
        return doc

    def find(self, collection: str, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        try:
            cur = self._col(collection).find(filter or {}, NO_ID).sort("timestamp", DESCENDING)
            return list(cur)
        except PyMongoError as e:
            raise _db_error(e) from e

    def find_one(self, collection: str, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            return self._col(collection).find_one(filter, NO_ID)
        except PyMongoError as e:
            raise _db_error(e) from e

    def count(self, collection: str, filter: Optional[Dict[str, Any]] = None) -> int:
        try:
            return self._col(collection).count_documents(filter or {})
        except PyMongoError as e:
            raise _db_error(e) from e

    def insert_many(self, collection: str, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not docs:
            return docs
        try:
            self._col(collection).insert_many([dict(d) for d in docs])
        except PyMongoError as e:
            raise _db_error(e) from e
        return docs

    def update(
        self,
        collection: str,
        filter: Dict[str, Any],
        patch: Dict[str, Any],
        not_found: str = "Document not found",
    ) -> Dict[str, Any]:
        try:
            updated = self._col(collection).find_one_and_update(
                filter,
                {"$set": patch},
                projection=NO_ID,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise _db_error(e) from e

        if updated is None:
            raise NotFound(not_found)
        return updated

    def upsert(self, collection: str, filter: Dict[str, Any], doc: Dict[str, Any]) -> Dict[str, Any]:
        try:
            updated = self._col(collection).find_one_and_update(
                filter,
                {"$set": doc},
                projection=NO_ID,
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise _db_error(e) from e
        return updated

    # ---------------------------------------------------------
    # SINGLETON FLAGS (app_meta: {key, value})
    # ---------------------------------------------------------
    def get_flag(self, key: str, default: bool) -> bool:
        doc = self.find_one(self.meta_collection, {"key": key})
        return bool(doc["value"]) if doc else default

    def set_flag(self, key: str, value: bool) -> bool:
        self.upsert(self.meta_collection, {"key": key}, {"key": key, "value": bool(value)})
        return bool(value)
