"""schemas/availability.py - Canonical availability shape returned by searchAvailability / availabilityCalendar."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field

from schemas.rates import Rate


class Pricing(BaseModel):
    # unitId is None on the aggregate pricing object
    unitId: Optional[str] = None
    original: float = 0
    retail: float = 0
    net: float = 0
    currencyPrecision: Optional[int] = None
    currency: Optional[str] = None


class PickupPoint(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    directions: Optional[str] = ""
    localDateTime: Optional[str] = None


class Availability(BaseModel):
    key: Optional[str] = None
    productId: Optional[str] = None
    optionId: Optional[str] = None
    dateTimeStart: Optional[str] = None
    dateTimeEnd: Optional[str] = None
    allDay: bool = False
    vacancies: int = 0
    available: bool = False
    status: Optional[str] = None
    currency: Optional[str] = None
    pricing: Pricing = Field(default_factory=Pricing)
    unitPricing: List[Pricing] = Field(default_factory=list)
    rates: List[Rate] = Field(default_factory=list)
    pickupAvailable: bool = False
    pickupRequired: Optional[bool] = None
    pickupPoints: List[PickupPoint] = Field(default_factory=list)
    offers: Optional[Any] = None
