"""
services/booking_search.py

Booking lookup across Rezdy's search styles.

By id, three lookups run side by side (order number, reseller reference,
free text). "No order found" answers count as empty; any other failure is
remembered, and only surfaces when nothing at all was found.
"""

from typing import Any, Dict, List, Optional

from errors import MissingSearchParameters, SearchExhausted
from providers.rezdy import RezdyClient, is_not_found
from schemas.payloads import SearchBookingPayload
from services.dates import parse_local_date
from services.fanout import bounded_map_settled


def _present(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


def validate_search_payload(payload: SearchBookingPayload) -> None:
    if _present(payload.bookingId):
        return
    if _present(payload.travelDateStart) or _present(payload.travelDateEnd) or _present(payload.dateFormat):
        return
    raise MissingSearchParameters()


def bookings_of(data: Any) -> List[dict]:
    """{booking: {...}}, {bookings: [...]} or a bare list -> list of booking dicts."""
    if isinstance(data, list):
        return [b for b in data if isinstance(b, dict)]
    if not isinstance(data, dict):
        return []
    if isinstance(data.get("bookings"), list):
        return [b for b in data["bookings"] if isinstance(b, dict)]
    if isinstance(data.get("booking"), dict):
        return [data["booking"]]
    return []


def dedupe_bookings(bookings: List[dict]) -> List[dict]:
    """Keep first occurrence per orderNumber (else id). Records with neither are dropped."""
    seen = set()
    out = []
    for b in bookings:
        ident = b.get("orderNumber") or b.get("id")
        if not ident:
            continue
        ident = str(ident)
        if ident in seen:
            continue
        seen.add(ident)
        out.append(b)
    return out


def lookup_urls(endpoint: str, booking_id: str) -> List[tuple]:
    return [
        ("id", f"{endpoint}/bookings/{booking_id}", None),
        ("resellerReference", f"{endpoint}/bookings", {"resellerReference": booking_id}),
        ("search", f"{endpoint}/bookings", {"search": booking_id}),
    ]


def search_by_id(
    client: RezdyClient,
    endpoint: str,
    api_key: Optional[str],
    booking_id: str,
    concurrency: int,
) -> List[dict]:
    strategies = lookup_urls(endpoint, booking_id)

    def _lookup(strategy) -> List[dict]:
        _, url, params = strategy
        try:
            return bookings_of(client.get(url, api_key=api_key, params=params))
        except Exception as e:
            if is_not_found(e):
                return []
            raise

    settled = bounded_map_settled(_lookup, strategies, concurrency=concurrency)

    found: List[dict] = []
    errors: List[BaseException] = []
    for (name, _, _), (result, err) in zip(strategies, settled):
        if err is not None:
            print(f"[booking_search] strategy={name} bookingId={booking_id} error={err}")
            errors.append(err)
            continue
        found.extend(result or [])

    bookings = dedupe_bookings(found)
    if not bookings and errors:
        raise SearchExhausted(errors)
    return bookings


def search_by_dates(
    client: RezdyClient,
    endpoint: str,
    api_key: Optional[str],
    payload: SearchBookingPayload,
) -> List[dict]:
    start = parse_local_date(payload.travelDateStart or payload.travelDateEnd, payload.dateFormat)
    end = parse_local_date(payload.travelDateEnd, payload.dateFormat) if payload.travelDateEnd else start
    params: Dict[str, str] = {
        "minTourStartTime": f"{start.isoformat()} 00:00:00",
        "maxTourStartTime": f"{end.isoformat()} 23:59:59",
    }
    try:
        data = client.get(f"{endpoint}/bookings", api_key=api_key, params=params)
    except Exception as e:
        if is_not_found(e):
            return []
        raise
    return bookings_of(data)


def search_bookings(
    client: RezdyClient,
    endpoint: str,
    api_key: Optional[str],
    payload: SearchBookingPayload,
    concurrency: int,
) -> List[dict]:
    validate_search_payload(payload)
    if _present(payload.bookingId):
        return search_by_id(client, endpoint, api_key, str(payload.bookingId).strip(), concurrency)
    if _present(payload.travelDateStart) or _present(payload.travelDateEnd):
        return search_by_dates(client, endpoint, api_key, payload)
    # dateFormat alone names no range to search
    return []
