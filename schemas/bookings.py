"""schemas/bookings.py - Canonical booking shape (create, search, cancel)."""

from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.availability import PickupPoint


class BookingHolder(BaseModel):
    name: Optional[str] = None
    surname: Optional[str] = None
    fullName: Optional[str] = None
    phoneNumber: Optional[str] = None
    emailAddress: Optional[str] = None


class UnitItem(BaseModel):
    unitItemId: Optional[str] = None
    unitId: Optional[str] = None
    unitName: str = ""
    quantity: Optional[int] = None


class BookingPrice(BaseModel):
    original: Optional[float] = None
    retail: Optional[float] = None
    currency: Optional[str] = None


class Booking(BaseModel):
    id: Optional[str] = None
    orderId: str = ""
    bookingId: str = ""
    supplierBookingId: Optional[str] = None
    status: Optional[str] = None
    productId: Optional[str] = None
    productName: Optional[str] = None
    cancellable: Optional[bool] = None
    editable: bool = False
    unitItems: List[UnitItem] = Field(default_factory=list)
    start: Optional[str] = None
    end: Optional[str] = None
    bookingDate: Optional[str] = None
    holder: BookingHolder = Field(default_factory=BookingHolder)
    notes: str = ""
    price: BookingPrice = Field(default_factory=BookingPrice)
    cancelPolicy: str = ""
    optionId: str = "default"
    optionName: Optional[str] = None
    resellerReference: str = ""
    publicUrl: Optional[str] = None
    privateUrl: str = ""
    pickupRequested: Optional[bool] = None
    pickupPointId: Optional[str] = None
    pickupPoint: Optional[PickupPoint] = None
