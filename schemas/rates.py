"""schemas/rates.py - Canonical rate shape (one per fare class / price option)."""

from typing import List, Optional

from pydantic import BaseModel, Field


class RatePricing(BaseModel):
    original: Optional[float] = None
    retail: Optional[float] = None
    currencyPrecision: int = 2
    currency: Optional[str] = None


class Rate(BaseModel):
    rateId: Optional[str] = None
    rateName: Optional[str] = None
    pricing: List[RatePricing] = Field(default_factory=list)
