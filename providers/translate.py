"""
providers/translate.py

Rezdy record -> canonical model mapping:
- Field alias tables (first match wins)
- Price option lookup helpers
- translate_product / translate_availability / translate_booking / translate_rate
- Projection of a model onto the caller's requested fields

Upstream varies field names between endpoints and API versions, so every
logical attribute is read through an explicit ordered alias tuple.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Type
from urllib.parse import urlparse

from pydantic import BaseModel

from config import DEFAULT_OPTION_ID
from errors import ProjectionError
from schemas.availability import Availability, PickupPoint, Pricing
from schemas.bookings import Booking, BookingHolder, BookingPrice, UnitItem
from schemas.payloads import UnitQuantity
from schemas.products import Product, ProductOption, Unit, UnitPricing
from schemas.rates import Rate, RatePricing


# =====================================================================
# SECTION: ALIAS TABLES
# =====================================================================

START_TIME_FIELDS = ("startTimeLocal", "startTime", "start", "dateTimeStart")
END_TIME_FIELDS = ("endTimeLocal", "endTime", "end", "dateTimeEnd")
STATUS_FIELDS = ("status", "availabilityStatus")
ALL_DAY_FIELDS = ("allDay", "allDayEvent")
PRICE_OPTIONS_FIELDS = ("priceOptions", "prices")

PRICE_OPTION_ID_FIELDS = ("id", "unitId")
PRICE_OPTION_LABEL_FIELDS = ("label", "name", "unitName")
PRICE_OPTION_PRICE_FIELDS = ("price", "amount")

PICKUP_ID_FIELDS = ("locationName", "id", "name")
PICKUP_NAME_FIELDS = ("locationName", "name", "id")
PICKUP_DIRECTIONS_FIELDS = ("pickupInstructions", "directions")
PICKUP_TIME_FIELDS = ("pickupTime", "localDateTime", "time")

RATE_ID_FIELDS = ("unitId", "id")
RATE_AMOUNT_FIELDS = ("total_including_tax", "price", "amount")

BOOKING_DATE_FIELDS = ("dateCreated", "createdDate")
BOOKING_CURRENCY_FIELDS = ("totalCurrency", "currency")
BOOKING_NOTES_FIELDS = ("internalNotes", "comments")
BOOKING_PICKUP_FIELDS = ("pickupPoint", "pickupLocation")

STATUS_CANCELLED = "CANCELLED"


def first_defined(record: Any, fields: Sequence[str], default: Any = None) -> Any:
    """Value of the first field present on the record, even if it is falsy."""
    if not isinstance(record, dict):
        return default
    for f in fields:
        if f in record:
            return record[f]
    return default


def first_truthy(record: Any, fields: Sequence[str], default: Any = None) -> Any:
    """Value of the first field holding a truthy value."""
    if not isinstance(record, dict):
        return default
    for f in fields:
        v = record.get(f)
        if v:
            return v
    return default


def _str_or_none(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


# =====================================================================
# SECTION: PRICE OPTION HELPERS
# =====================================================================

def price_options_of(record: Any) -> List[dict]:
    options = first_truthy(record, PRICE_OPTIONS_FIELDS, [])
    return [o for o in options if isinstance(o, dict)] if isinstance(options, list) else []


def price_option_price(option: dict) -> float:
    value = first_defined(option, PRICE_OPTION_PRICE_FIELDS)
    return _to_float(value) or 0.0


def price_option_label(option: Optional[dict]) -> Optional[str]:
    if not option:
        return None
    return first_truthy(option, PRICE_OPTION_LABEL_FIELDS)


def find_price_option_by_unit_id(price_options: Iterable[dict], unit_id: Any) -> Optional[dict]:
    """Case-insensitive match of unit_id against each option's id or unitId."""
    if unit_id is None:
        return None
    wanted = str(unit_id).lower()
    for p in price_options or []:
        for f in PRICE_OPTION_ID_FIELDS:
            if p.get(f) is not None and str(p[f]).lower() == wanted:
                return p
    return None


def find_price_option_by_label(price_options: Iterable[dict], label: Optional[str]) -> Optional[dict]:
    if not label:
        return None
    wanted = str(label).lower()
    for p in price_options or []:
        for f in ("label", "name"):
            if p.get(f) and str(p[f]).lower() == wanted:
                return p
    return None


def compute_total_amount(price_options: List[dict], units: Optional[List[UnitQuantity]]) -> float:
    """Sum of price * quantity over the requested units; unmatched units add nothing."""
    total = 0.0
    if not price_options or not units:
        return total
    for u in units:
        if u is None or u.unitId in (None, ""):
            continue
        option = find_price_option_by_unit_id(price_options, u.unitId)
        if option is None:
            continue
        total += price_option_price(option) * (u.quantity or 0)
    return total


# =====================================================================
# SECTION: PRODUCT
# =====================================================================

def translate_product(raw: dict) -> Product:
    currency = raw.get("currency")
    name = raw.get("name") or raw.get("productName")

    units = []
    for p in price_options_of(raw):
        price = _to_float(p.get("price"))
        units.append(Unit(
            unitId=_str_or_none(first_defined(p, PRICE_OPTION_ID_FIELDS)),
            unitName=p.get("label") or "",
            restrictions=p.get("restrictions") or {},
            pricing=[UnitPricing(original=price, retail=price, currency=currency)],
        ))

    return Product(
        productId=_str_or_none(raw.get("productCode")),
        productName=name,
        availableCurrencies=[currency] if currency else [],
        defaultCurrency=currency,
        options=[ProductOption(optionId=DEFAULT_OPTION_ID, optionName=name, units=units)],
    )


# =====================================================================
# SECTION: RATE
# =====================================================================

def translate_rate(raw: dict, currency: Optional[str] = None) -> Rate:
    label = first_truthy(raw, ("unitName",) + PRICE_OPTION_LABEL_FIELDS)
    amount = _to_float(first_defined(raw, RATE_AMOUNT_FIELDS))
    company = raw.get("company") if isinstance(raw.get("company"), dict) else {}

    return Rate(
        rateId=_str_or_none(first_defined(raw, RATE_ID_FIELDS)),
        rateName=str(label).lower() if label else None,
        pricing=[RatePricing(
            original=amount,
            retail=amount,
            currencyPrecision=2,
            currency=company.get("currency") or currency,
        )],
    )


# =====================================================================
# SECTION: AVAILABILITY
# =====================================================================

def translate_pickup_point(raw: dict) -> PickupPoint:
    return PickupPoint(
        id=_str_or_none(first_truthy(raw, PICKUP_ID_FIELDS)),
        name=_str_or_none(first_truthy(raw, PICKUP_NAME_FIELDS)),
        directions=first_truthy(raw, PICKUP_DIRECTIONS_FIELDS, ""),
        localDateTime=first_truthy(raw, PICKUP_TIME_FIELDS),
    )


def translate_availability(
    raw: dict,
    product_id: Optional[str],
    option_id: Optional[str],
    units: Optional[List[UnitQuantity]],
    vacancies: int,
    pickup_points: Optional[List[dict]] = None,
    currency: Optional[str] = None,
    key: Optional[str] = None,
    status: Optional[str] = None,
) -> Availability:
    currency = currency or raw.get("currency")
    price_options = price_options_of(raw)
    total = compute_total_amount(price_options, units)

    unit_pricing = []
    for p in price_options:
        price = price_option_price(p)
        unit_pricing.append(Pricing(
            unitId=_str_or_none(first_truthy(p, PRICE_OPTION_ID_FIELDS + ("label", "name"))),
            original=price,
            retail=price,
            net=price,
            currencyPrecision=p.get("currencyPrecision"),
            currency=currency,
        ))

    all_day = first_defined(raw, ALL_DAY_FIELDS, False)
    pickups = [translate_pickup_point(o) for o in (pickup_points or []) if isinstance(o, dict)]

    return Availability(
        key=key,
        productId=product_id,
        optionId=option_id,
        dateTimeStart=first_truthy(raw, START_TIME_FIELDS),
        dateTimeEnd=first_truthy(raw, END_TIME_FIELDS),
        allDay=bool(all_day),
        vacancies=vacancies,
        available=vacancies > 0,
        status=status or first_truthy(raw, STATUS_FIELDS),
        currency=currency,
        pricing=Pricing(original=total, retail=total, net=total, currency=currency),
        unitPricing=unit_pricing,
        rates=[translate_rate(p, currency=currency) for p in price_options],
        pickupAvailable=len(pickups) > 0,
        pickupRequired=raw.get("pickupRequired"),
        pickupPoints=pickups,
        offers=raw.get("offers"),
    )


# =====================================================================
# SECTION: BOOKING
# =====================================================================

def build_dashboard_url(order_number: Optional[str], api_endpoint: Optional[str]) -> str:
    """
    Supplier-facing order page: api.<domain> -> app.<domain>/orders/edit/<orderNumber>.
    Empty string when either part is missing or the endpoint does not parse.
    """
    if not order_number or not api_endpoint or not isinstance(api_endpoint, str):
        return ""
    try:
        parsed = urlparse(api_endpoint)
    except ValueError:
        return ""
    if not parsed.scheme or not parsed.netloc:
        return ""
    host = parsed.netloc
    if host.startswith("api."):
        host = "app." + host[len("api."):]
    return f"{parsed.scheme}://{host}/orders/edit/{order_number}"


def unwrap_booking(raw: Any) -> dict:
    """{requestStatus, booking: {...}} and bare booking dicts both map to the booking dict."""
    if isinstance(raw, dict) and isinstance(raw.get("booking"), dict):
        return raw["booking"]
    return raw if isinstance(raw, dict) else {}


def translate_booking(raw: Any, api_endpoint: Optional[str] = None) -> Booking:
    booking = unwrap_booking(raw)
    items = booking.get("items") or []
    first_item = items[0] if items and isinstance(items[0], dict) else {}
    customer = booking.get("customer") or {}
    order_number = _str_or_none(booking.get("orderNumber"))
    status = booking.get("status")

    unit_items = []
    for q in first_item.get("quantities") or []:
        label = q.get("optionLabel")
        quantity = q.get("quantity") if q.get("quantity") is not None else q.get("value")
        unit_items.append(UnitItem(
            unitItemId=label,
            unitId=label,
            unitName=label or "",
            quantity=_to_int(quantity),
        ))

    pickup = first_truthy(first_item, BOOKING_PICKUP_FIELDS)
    pickup_point = translate_pickup_point(pickup) if isinstance(pickup, dict) else None

    # cancelled bookings can never be cancelled again
    cancellable = False if status == STATUS_CANCELLED else booking.get("cancellable")

    return Booking(
        id=order_number,
        orderId=order_number or "",
        bookingId=order_number or "",
        supplierBookingId=order_number,
        status=status,
        productId=_str_or_none(first_item.get("productCode")),
        productName=first_item.get("productName"),
        cancellable=cancellable,
        editable=False,
        unitItems=unit_items,
        start=first_item.get("startTimeLocal"),
        end=first_item.get("endTimeLocal"),
        bookingDate=first_truthy(booking, BOOKING_DATE_FIELDS),
        holder=BookingHolder(
            name=customer.get("firstName"),
            surname=customer.get("lastName"),
            fullName=customer.get("name"),
            phoneNumber=customer.get("phone"),
            emailAddress=customer.get("email"),
        ),
        notes=first_truthy(booking, BOOKING_NOTES_FIELDS, ""),
        price=BookingPrice(
            original=_to_float(booking.get("totalAmount")),
            retail=_to_float(booking.get("totalAmount")),
            currency=first_truthy(booking, BOOKING_CURRENCY_FIELDS),
        ),
        cancelPolicy="",
        optionId=DEFAULT_OPTION_ID,
        optionName=first_item.get("productName"),
        resellerReference=booking.get("resellerReference") or "",
        publicUrl=booking.get("confirmation_url"),
        privateUrl=build_dashboard_url(order_number, api_endpoint),
        pickupRequested=booking.get("pickupRequested"),
        pickupPointId=_str_or_none(booking.get("pickupPointId")),
        pickupPoint=pickup_point,
    )


# =====================================================================
# SECTION: PROJECTION
# =====================================================================

def check_fields(model_cls: Type[BaseModel], fields: Optional[List[str]]) -> None:
    """Raise ProjectionError naming every requested field the model lacks."""
    if fields is None:
        return
    errors = [
        f'Cannot query field "{f}" on type "{model_cls.__name__}".'
        for f in fields
        if f not in model_cls.model_fields
    ]
    if errors:
        raise ProjectionError(errors)


def project(model: Optional[BaseModel], fields: Optional[List[str]] = None) -> Optional[Dict[str, Any]]:
    if model is None:
        return None
    check_fields(type(model), fields)
    if fields is None:
        return model.model_dump()
    return model.model_dump(include=set(fields))
