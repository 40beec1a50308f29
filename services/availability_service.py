"""
services/availability_service.py

Availability search for one or more products:
- Seat count normalization
- Upstream envelope extraction (the availability endpoint varies its shape)
- Sellability / status derivation
- Per-product session + pickup fan-out, results paired back by position
"""

import math
from typing import Any, Dict, List, Optional

from errors import LengthMismatch, ValidationError
from providers.rezdy import RezdyClient
from providers.translate import (
    START_TIME_FIELDS,
    STATUS_FIELDS,
    first_defined,
    first_truthy,
    price_options_of,
    translate_availability,
)
from schemas.availability import Availability
from schemas.payloads import AvailabilityPayload, UnitQuantity
from services.availability_key import encode_availability_key
from services.dates import parse_local_date
from services.fanout import bounded_map

SEAT_FIELDS = ("seatsAvailable", "available", "vacancies", "availableSeats", "remainingSeats")

# requestStatus-wrapped bodies and bare bodies prefer different list fields
WRAPPED_LIST_FIELDS = ("sessions", "availability", "data", "items")
BARE_LIST_FIELDS = ("data", "availability", "sessions", "items")

SELLABLE_STATUSES = ("AVAILABLE", "FREESALE")
STATUS_AVAILABLE = "AVAILABLE"
STATUS_UNAVAILABLE = "UNAVAILABLE"


# =====================================================================
# SECTION: NORMALIZATION
# =====================================================================

def calculate_seats_available(record: Any) -> int:
    """
    First defined of SEAT_FIELDS, coerced to a number. Unparseable -> 0.
    Negative counts are returned as-is.
    """
    value = first_defined(record, SEAT_FIELDS, 0)
    if value is None:
        return 0
    try:
        seats = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(seats) or math.isinf(seats):
        return 0
    return int(seats)


def _first_populated_list(data: dict, fields) -> Optional[list]:
    for f in fields:
        v = data.get(f)
        if isinstance(v, list) and v:
            return v
    return None


def extract_availability_data(data: Any, product_id: Any = None) -> List[Any]:
    """Classify an availability response body into a list of session records. Never raises."""
    if data is None:
        return []

    if isinstance(data, dict) and "requestStatus" in data:
        status = data.get("requestStatus")
        if isinstance(status, dict) and status.get("success") is False:
            print(f"[availability] productCode={product_id} requestStatus success=false")
            return []
        found = _first_populated_list(data, WRAPPED_LIST_FIELDS)
        if found is not None:
            return found

    if isinstance(data, list):
        return data

    if isinstance(data, dict):
        found = _first_populated_list(data, BARE_LIST_FIELDS)
        if found is not None:
            return found
        if "requestStatus" not in data:
            return [data]

    return []


def session_status(record: dict, seats: int) -> str:
    status = first_truthy(record, STATUS_FIELDS)
    if status:
        return str(status)
    return STATUS_AVAILABLE if seats > 0 else STATUS_UNAVAILABLE


def is_sellable(record: Any, status: Optional[str]) -> bool:
    return (
        isinstance(record, dict)
        and status in SELLABLE_STATUSES
        and bool(first_truthy(record, START_TIME_FIELDS))
    )


# =====================================================================
# SECTION: PAYLOAD CHECKS
# =====================================================================

def validate_availability_payload(payload: AvailabilityPayload) -> None:
    if len(payload.productIds) != len(payload.optionIds):
        raise LengthMismatch("mismatched productIds/options length")
    if len(payload.optionIds) != len(payload.units):
        raise LengthMismatch("mismatched options/units length")
    if not all(payload.productIds):
        raise ValidationError("some invalid productId(s)")
    if not all(payload.optionIds):
        raise ValidationError("some invalid optionId(s)")


def requested_quantity(units: Optional[List[UnitQuantity]]) -> int:
    return sum((u.quantity or 0) for u in (units or []) if u is not None)


# =====================================================================
# SECTION: FETCH + BUILD
# =====================================================================

def fetch_sessions(
    client: RezdyClient,
    endpoint: str,
    api_key: Optional[str],
    product_id: Any,
    start_day: str,
    end_day: str,
    min_availability: int,
) -> List[Any]:
    data = client.get(
        f"{endpoint}/availability",
        api_key=api_key,
        params={
            "productCode": product_id,
            "startTimeLocal": f"{start_day} 00:00:00",
            "endTimeLocal": f"{end_day} 23:59:59",
            "minAvailability": min_availability,
        },
        allow_failed_status=True,
    )
    return extract_availability_data(data, product_id)


def fetch_pickup_points(client: RezdyClient, endpoint: str, api_key: Optional[str], product_id: Any) -> List[dict]:
    data = client.get(f"{endpoint}/products/{product_id}/pickups", api_key=api_key, allow_failed_status=True)
    if not isinstance(data, dict):
        return []
    locations = data.get("pickupLocations")
    return [p for p in locations if isinstance(p, dict)] if isinstance(locations, list) else []


def collect_availability(
    client: RezdyClient,
    endpoint: str,
    api_key: Optional[str],
    payload: AvailabilityPayload,
    jwt_key: Optional[str],
    concurrency: int,
) -> List[List[Availability]]:
    """
    One list of sellable sessions per requested product, in request order.
    Keys are minted only when jwt_key is set.
    """
    validate_availability_payload(payload)

    start = parse_local_date(payload.startDate, payload.dateFormat)
    end = parse_local_date(payload.endDate, payload.dateFormat) if payload.endDate else start
    start_day, end_day = start.isoformat(), end.isoformat()

    indices = list(range(len(payload.productIds)))
    sessions_by_product = bounded_map(
        lambda ix: fetch_sessions(
            client, endpoint, api_key,
            payload.productIds[ix], start_day, end_day,
            requested_quantity(payload.units[ix]),
        ),
        indices,
        concurrency=concurrency,
    )

    # pickups: one call per distinct product that has at least one session
    with_sessions = []
    for ix in indices:
        pid = str(payload.productIds[ix])
        if sessions_by_product[ix] and pid not in with_sessions:
            with_sessions.append(pid)
    pickup_lists = bounded_map(
        lambda pid: fetch_pickup_points(client, endpoint, api_key, pid),
        with_sessions,
        concurrency=concurrency,
    )
    pickups: Dict[str, List[dict]] = dict(zip(with_sessions, pickup_lists))

    out: List[List[Availability]] = []
    for ix in indices:
        product_id = str(payload.productIds[ix])
        option_id = str(payload.optionIds[ix])
        units = payload.units[ix]
        kept = []
        for raw in sessions_by_product[ix]:
            if not isinstance(raw, dict):
                continue
            seats = calculate_seats_available(raw)
            status = session_status(raw, seats)
            if not is_sellable(raw, status):
                continue
            key = None
            if jwt_key:
                key = encode_availability_key(
                    jwt_key,
                    product_id,
                    first_truthy(raw, START_TIME_FIELDS),
                    units,
                    price_options_of(raw),
                )
            kept.append(translate_availability(
                raw,
                product_id=product_id,
                option_id=option_id,
                units=units,
                vacancies=seats,
                pickup_points=pickups.get(product_id, []),
                currency=payload.currency,
                key=key,
                status=status,
            ))
        print(f"[availability] productCode={product_id} sessions={len(sessions_by_product[ix])} sellable={len(kept)}")
        out.append(kept)
    return out
