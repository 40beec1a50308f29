"""
services/availability_key.py

Availability key codec.

An availability key is a signed JWT carrying everything createBooking needs
to build the Rezdy booking request:

    {"items": [{"productCode", "startTimeLocal", "quantities": [{"optionLabel", "value"}]}],
     "totalAmount": <price at search time>}

Nothing is stored server side; the key is the only link between a search and
a later booking. Keys carry no expiry (see DESIGN.md).
"""

from typing import Any, Dict, List, Optional

import jwt

from config import DEFAULT_UNIT_LABEL, REZDY_DEBUG, REZDY_JWT_ALGORITHM
from errors import ConfigurationError, InvalidAvailabilityKey
from providers.translate import (
    compute_total_amount,
    find_price_option_by_label,
    find_price_option_by_unit_id,
    price_option_label,
)
from schemas.payloads import UnitQuantity


def resolve_option_label(unit: UnitQuantity, price_options: List[dict]) -> str:
    """
    Rezdy books by option label, callers send unit ids. Resolution order:
    the unit's own label, the label of the option matching its id, an option
    whose label equals the unit id (case-insensitive), then "Adult".
    """
    label = unit.unitName or unit.label
    if label:
        return label

    label = price_option_label(find_price_option_by_unit_id(price_options, unit.unitId))
    if label:
        return label

    fallback = find_price_option_by_label(price_options, unit.unitId)
    if fallback is not None:
        if REZDY_DEBUG:
            print(f"[availability_key] fallback label match unitId={unit.unitId} matched={fallback.get('id') or fallback.get('unitId')}")
        label = price_option_label(fallback)
    return label or DEFAULT_UNIT_LABEL


def build_key_payload(
    product_id: str,
    start_time_local: str,
    units: Optional[List[UnitQuantity]],
    price_options: List[dict],
) -> Dict[str, Any]:
    quantities = [
        {"optionLabel": resolve_option_label(u, price_options), "value": u.quantity or 0}
        for u in (units or [])
        if u is not None and (u.quantity or 0) > 0
    ]
    return {
        "items": [{
            "productCode": product_id,
            "startTimeLocal": start_time_local,
            "quantities": quantities,
        }],
        "totalAmount": compute_total_amount(price_options, units),
    }


def encode_availability_key(
    secret: Optional[str],
    product_id: str,
    start_time_local: str,
    units: Optional[List[UnitQuantity]],
    price_options: List[dict],
) -> str:
    if not secret:
        raise ConfigurationError("JWT secret should be set")
    payload = build_key_payload(product_id, start_time_local, units, price_options)
    return jwt.encode(payload, secret, algorithm=REZDY_JWT_ALGORITHM)


def decode_availability_key(token: str, secret: Optional[str]) -> Dict[str, Any]:
    """Verify the signature and return the payload as minted; nothing is re-checked upstream."""
    if not secret:
        raise ConfigurationError("JWT secret should be set")
    try:
        payload = jwt.decode(token, secret, algorithms=[REZDY_JWT_ALGORITHM])
    except jwt.InvalidTokenError as e:
        raise InvalidAvailabilityKey(str(e) or type(e).__name__)
    if not isinstance(payload.get("items"), list):
        raise InvalidAvailabilityKey("missing items")
    return payload
