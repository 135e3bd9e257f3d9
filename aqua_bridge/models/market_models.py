# aqua_bridge/models/market_models.py

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from aqua_bridge.models.harvest_models import ShrimpGrade


class ShrimpPriceModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    grade: ShrimpGrade
    price: float
    previousPrice: Optional[float] = None
    updatedAt: Optional[str] = None


class PriceUpdateModel(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    grade: ShrimpGrade
    price: float = Field(..., ge=0)

    @field_validator("price", mode="before")
    @classmethod
    def _numeric_price(cls, v):
        # "550" or True must not pass as a price
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("price must be a number")
        return v


class MarketStatusUpdateModel(BaseModel):
    isOpen: StrictBool


# Seed data for an empty price collection (server and local store alike)
DEFAULT_SHRIMP_PRICES: List[dict] = [
    {"grade": ShrimpGrade.PREMIUM.value, "price": 550, "previousPrice": None, "updatedAt": None},
    {"grade": ShrimpGrade.A.value, "price": 450, "previousPrice": None, "updatedAt": None},
    {"grade": ShrimpGrade.B.value, "price": 380, "previousPrice": None, "updatedAt": None},
    {"grade": ShrimpGrade.C.value, "price": 300, "previousPrice": None, "updatedAt": None},
]


def default_prices() -> List[dict]:
    return [dict(p) for p in DEFAULT_SHRIMP_PRICES]
