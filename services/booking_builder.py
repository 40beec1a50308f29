"""
services/booking_builder.py

Builds the Rezdy POST /bookings body from a decoded availability key and the
caller's createBooking payload.
"""

import math
from typing import Any, Dict, List, Optional

from config import (
    DEFAULT_PAYMENT_LABEL,
    DEFAULT_PAYMENT_RECIPIENT,
    DEFAULT_PAYMENT_TYPE,
    EMAIL_COLLECT_SENTINEL,
)
from errors import MissingAvailabilityKey, MissingHolderName, MissingHolderSurname
from schemas.payloads import CreateBookingPayload, Holder, Participant, Payment

FIRST_NAME_LABEL = "First Name"
LAST_NAME_LABEL = "Last Name"


def validate_booking_payload(payload: CreateBookingPayload) -> None:
    """Checks that must pass before the key is decoded or anything is sent upstream."""
    if not payload.availabilityKey:
        raise MissingAvailabilityKey()
    holder = payload.holder
    if holder is None or not holder.name:
        raise MissingHolderName()
    if not holder.surname:
        raise MissingHolderSurname()


def _non_negative_amount(value: Any) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(amount) or math.isinf(amount) or amount < 0:
        return 0.0
    return amount


def _to_count(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def normalize_quantities(quantities: Any) -> List[Dict[str, Any]]:
    """Accept {optionLabel, value} and the older {label, quantity} shape."""
    out = []
    for q in quantities or []:
        if not isinstance(q, dict):
            continue
        label = q.get("optionLabel") or q.get("label")
        value = q.get("value") if q.get("value") is not None else q.get("quantity")
        out.append({"optionLabel": label, "value": _to_count(value)})
    return out


def build_customer(holder: Holder) -> Dict[str, Any]:
    customer = {
        "firstName": holder.name,
        "lastName": holder.surname,
        "phone": holder.phone_value(),
    }
    email = holder.email_value()
    if email and email.strip().lower() != EMAIL_COLLECT_SENTINEL:
        customer["email"] = email
    if holder.country:
        customer["countryCode"] = holder.country
    return customer


def serialize_participant(participant: Participant, holder: Holder) -> Dict[str, Any]:
    if participant.fieldList is not None:
        return {"fields": participant.fieldList}
    fields = [
        {"label": FIRST_NAME_LABEL, "value": participant.name or participant.firstName or holder.name},
        {"label": LAST_NAME_LABEL, "value": participant.surname or participant.lastName or holder.surname},
    ]
    for label, value in (participant.extraFields or {}).items():
        fields.append({"label": label, "value": value})
    return {"fields": fields}


def holder_participant(holder: Holder) -> Dict[str, Any]:
    return {"fields": [
        {"label": FIRST_NAME_LABEL, "value": holder.name},
        {"label": LAST_NAME_LABEL, "value": holder.surname},
    ]}


def build_participants(
    quantities: List[Dict[str, Any]],
    holder: Holder,
    supplied: Optional[List[Participant]] = None,
) -> List[Dict[str, Any]]:
    """Caller participants first, then holder-named ones up to max(total seats, 1)."""
    target = max(sum(q["value"] for q in quantities), 1)
    participants = [serialize_participant(p, holder) for p in (supplied or [])]
    while len(participants) < target:
        participants.append(holder_participant(holder))
    return participants


def build_payments(payments: Optional[List[Payment]], total_amount: Any) -> List[Dict[str, Any]]:
    if not payments:
        payments = [Payment(amount=total_amount)]
    return [
        {
            "amount": _non_negative_amount(p.amount),
            "type": p.type or DEFAULT_PAYMENT_TYPE,
            "recipient": p.recipient or DEFAULT_PAYMENT_RECIPIENT,
            "label": p.label or DEFAULT_PAYMENT_LABEL,
        }
        for p in payments
    ]


def build_booking_request(
    key_payload: Dict[str, Any],
    payload: CreateBookingPayload,
    reseller_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    key_payload is the decoded availability key. reseller_id is the token's,
    used only when the payload does not carry one.
    """
    holder = payload.holder

    items = []
    for ix, item in enumerate(key_payload.get("items") or []):
        if not isinstance(item, dict):
            continue
        quantities = normalize_quantities(item.get("quantities"))
        line = {
            "productCode": item.get("productCode"),
            "startTimeLocal": item.get("startTimeLocal"),
            "quantities": quantities,
            "participants": build_participants(
                quantities,
                holder,
                payload.participants if ix == 0 else None,
            ),
        }
        if payload.pickupPoint:
            line["pickupLocation"] = {"locationName": payload.pickupPoint}
        items.append(line)

    body: Dict[str, Any] = {
        "customer": build_customer(holder),
        "items": items,
        "payments": build_payments(payload.payments, key_payload.get("totalAmount")),
    }
    if payload.notes:
        body["internalNotes"] = payload.notes
    if payload.reference:
        body["resellerReference"] = payload.reference
    if payload.resellerId or reseller_id:
        body["resellerId"] = payload.resellerId or reseller_id
    if payload.createdBy:
        body["createdBy"] = payload.createdBy
    return body
