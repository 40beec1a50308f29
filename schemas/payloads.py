"""schemas/payloads.py - Pydantic models for caller input (token, operation payloads, projection context)."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Token(BaseModel):
    """Per-call credential bundle. Never persisted."""
    model_config = ConfigDict(extra="allow")

    endpoint: Optional[Any] = None
    apiKey: Optional[str] = None
    resellerId: Optional[str] = None


class UnitQuantity(BaseModel):
    model_config = ConfigDict(extra="allow")

    unitId: Optional[Union[str, int]] = None
    quantity: Optional[int] = Field(default=0, ge=0)
    unitName: Optional[str] = None
    label: Optional[str] = None


class Holder(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    surname: Optional[str] = None
    emailAddress: Optional[str] = None
    email: Optional[str] = None
    phoneNumber: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    locales: Optional[List[str]] = None

    def email_value(self) -> Optional[str]:
        return self.emailAddress or self.email

    def phone_value(self) -> str:
        return self.phoneNumber or self.phone or ""


class Participant(BaseModel):
    """
    Either name parts (plus optional extraFields) or a ready-made Rezdy
    field list under `fields`, which is passed through untouched.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: Optional[str] = None
    surname: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    extraFields: Dict[str, Any] = Field(default_factory=dict)
    fieldList: Optional[List[Dict[str, Any]]] = Field(default=None, alias="fields")


class Payment(BaseModel):
    model_config = ConfigDict(extra="allow")

    amount: Any = None
    type: Optional[str] = None
    recipient: Optional[str] = None
    label: Optional[str] = None


# =====================================================================
# SECTION: OPERATION PAYLOADS
# =====================================================================

class ProductSearchPayload(BaseModel):
    # extra keys are post-filters against projected products
    model_config = ConfigDict(extra="allow")

    productId: Optional[Union[str, int]] = None

    def extra_filters(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class AvailabilityPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    productIds: List[Any] = Field(default_factory=list)
    optionIds: List[Any] = Field(default_factory=list)
    units: List[List[UnitQuantity]] = Field(default_factory=list)
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    dateFormat: Optional[str] = None
    currency: Optional[str] = None


class CreateBookingPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    availabilityKey: Optional[str] = None
    holder: Optional[Holder] = None
    notes: Optional[str] = None
    reference: Optional[str] = None
    pickupPoint: Optional[str] = None
    participants: Optional[List[Participant]] = None
    payments: Optional[List[Payment]] = None
    resellerId: Optional[str] = None
    createdBy: Optional[Any] = None
    settlementMethod: Optional[str] = None


class CancelBookingPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    bookingId: Optional[Union[str, int]] = None
    id: Optional[Union[str, int]] = None
    reason: Optional[str] = None


class SearchBookingPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    bookingId: Optional[Union[str, int]] = None
    travelDateStart: Optional[str] = None
    travelDateEnd: Optional[str] = None
    dateFormat: Optional[str] = None


class QuotePayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    productIds: List[Any] = Field(default_factory=list)
    optionIds: List[Any] = Field(default_factory=list)


class ProjectionContext(BaseModel):
    """Requested top-level fields per entity. None means every field."""
    product: Optional[List[str]] = None
    availability: Optional[List[str]] = None
    booking: Optional[List[str]] = None
    rate: Optional[List[str]] = None


class OperationRequest(BaseModel):
    """Body shape of every hosting route: {token, payload, projection}."""
    token: Token = Field(default_factory=Token)
    payload: Dict[str, Any] = Field(default_factory=dict)
    projection: Optional[ProjectionContext] = None
