"""schemas/products.py - Canonical product shape."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class UnitPricing(BaseModel):
    original: Optional[float] = None
    retail: Optional[float] = None
    currency: Optional[str] = None


class Unit(BaseModel):
    unitId: Optional[str] = None
    unitName: str = ""
    restrictions: Dict[str, Any] = Field(default_factory=dict)
    pricing: List[UnitPricing] = Field(default_factory=list)


class ProductOption(BaseModel):
    optionId: str
    optionName: Optional[str] = None
    units: List[Unit] = Field(default_factory=list)


class Product(BaseModel):
    productId: Optional[str] = None
    productName: Optional[str] = None
    availableCurrencies: List[str] = Field(default_factory=list)
    defaultCurrency: Optional[str] = None
    options: List[ProductOption] = Field(default_factory=list)
