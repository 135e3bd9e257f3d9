# aqua_bridge/models/harvest_models.py

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ShrimpGrade(str, Enum):
    PREMIUM = "Premium"
    A = "A"
    B = "B"
    C = "C"


class HarvestStatus(str, Enum):
    PENDING = "Pending Approval"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    COMPLETED = "Completed"


class HarvestRequestCreateModel(BaseModel):
    """What a farmer submits. Extra metadata fields are kept as-is."""

    model_config = ConfigDict(extra="allow", use_enum_values=True)

    farmerId: str = Field(..., min_length=1)
    grade: ShrimpGrade
    quantity: float = Field(..., gt=0)

    location: Optional[str] = None
    farmerName: Optional[str] = None
    pondId: Optional[str] = None
    harvestDate: Optional[str] = None
    notes: Optional[str] = None


class HarvestRequestModel(HarvestRequestCreateModel):
    id: str
    status: HarvestStatus = HarvestStatus.PENDING
    timestamp: int


class HarvestStatusUpdateModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    status: HarvestStatus
