# aqua_bridge/services/harvest_service.py

import logging
import time
import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from aqua_bridge.errors import ValidationError
from aqua_bridge.models.harvest_models import (
    HarvestRequestModel,
    HarvestStatus,
    HarvestStatusUpdateModel,
)
from aqua_bridge.services.document_store import DocumentStore

logger = logging.getLogger(__name__)


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex}"


def _first_error(e: PydanticValidationError) -> str:
    err = e.errors()[0]
    field = ".".join(str(x) for x in err.get("loc", ())) or "payload"
    return f"{field}: {err.get('msg', 'invalid')}"


class HarvestService:

    def __init__(self, store: DocumentStore, collection: str = "harvest_requests"):
        self.store = store
        self.collection = collection

    # ---------------------------------------------------------
    # SUBMIT (farmer)
    # ---------------------------------------------------------
    def submit_request(self, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        payload = dict(payload) if isinstance(payload, dict) else {}

        # client-controlled values never survive submission
        for k in ("id", "status", "timestamp", "_id"):
            payload.pop(k, None)

        if not payload.get("farmerId") or not payload.get("grade") or not payload.get("quantity"):
            raise ValidationError("Missing fields")

        try:
            model = HarvestRequestModel(
                **payload,
                id=new_request_id(),
                status=HarvestStatus.PENDING,
                timestamp=int(time.time() * 1000),
            )
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid payload: {_first_error(e)}") from e

        doc = model.model_dump(exclude_none=True)
        self.store.insert(self.collection, doc)
        logger.info("Harvest request %s submitted by %s", doc["id"], doc["farmerId"])
        return doc

    # ---------------------------------------------------------
    # LIST (newest first)
    # ---------------------------------------------------------
    def list_requests(self, farmer_id: Optional[str] = None) -> List[Dict[str, Any]]:
        query = {"farmerId": str(farmer_id)} if farmer_id else {}
        return self.store.find(self.collection, query)

    # ---------------------------------------------------------
    # STATUS TRANSITION (admin)
    # ---------------------------------------------------------
    def update_status(self, request_id: str, payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        payload = payload if isinstance(payload, dict) else {}
        if not payload.get("status"):
            raise ValidationError("Missing status")

        try:
            model = HarvestStatusUpdateModel(status=payload["status"])
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid status: {payload['status']}") from e

        updated = self.store.update(
            self.collection,
            {"id": request_id},
            {"status": model.status},
            not_found="Request not found",
        )
        logger.info("Harvest request %s -> %s", request_id, model.status)
        return updated
