"""Canned Rezdy bodies and a recording stand-in for requests.Session."""

import copy
import json
import threading
from types import SimpleNamespace
from urllib.parse import urlencode

import requests

ENDPOINT = "https://api.rezdy.test/v1"
JWT_KEY = "test-signing-secret-0123456789abcdef"
TOKEN = {"apiKey": "abc123def", "resellerId": "fed321"}

OK = {"success": True, "version": "v1"}


# =====================================================================
# SECTION: FAKE SESSION
# =====================================================================

class FakeResponse:
    def __init__(self, status_code, body, url, request):
        self.status_code = status_code
        self._body = body
        self.url = url
        self.request = request
        self.headers = {"Content-Type": "application/json", "Set-Cookie": "session=secret"}

    @property
    def text(self):
        return self._body if isinstance(self._body, str) else json.dumps(self._body)

    def json(self):
        if isinstance(self._body, str):
            raise ValueError("not json")
        return copy.deepcopy(self._body)


class FakeSession:
    """
    Routes are matched on method + exact URL, plus a subset match on params.
    First registered match wins. Unmatched calls get a 404.
    """

    def __init__(self):
        self.routes = []
        self.calls = []
        self._lock = threading.Lock()

    def add(self, method, url, body=None, status=200, params=None, raises=None):
        self.routes.append({
            "method": method.upper(),
            "url": url,
            "params": params or {},
            "body": body if body is not None else {"requestStatus": OK},
            "status": status,
            "raises": raises,
        })
        return self

    def _match(self, method, url, params):
        for r in self.routes:
            if r["method"] != method or r["url"] != url:
                continue
            if all(str((params or {}).get(k)) == str(v) for k, v in r["params"].items()):
                return r
        return None

    def request(self, method, url, params=None, json=None, headers=None, timeout=None, hooks=None):
        with self._lock:
            self.calls.append({
                "method": method,
                "url": url,
                "params": dict(params or {}),
                "json": json,
                "headers": dict(headers or {}),
                "timeout": timeout,
            })
        route = self._match(method, url, params)
        if route is not None and route["raises"] is not None:
            raise route["raises"]

        full_url = f"{url}?{urlencode(params)}" if params else url
        req = SimpleNamespace(method=method, url=full_url, headers=dict(headers or {}))
        if route is None:
            resp = FakeResponse(404, {"message": f"no route for {method} {url}"}, full_url, req)
        else:
            resp = FakeResponse(route["status"], route["body"], full_url, req)
        hook = (hooks or {}).get("response")
        if hook is not None:
            hook(resp)
        return resp

    def calls_to(self, method, url):
        return [c for c in self.calls if c["method"] == method and c["url"] == url]


def connection_error(message="connection reset"):
    return requests.ConnectionError(message)


# =====================================================================
# SECTION: PRODUCTS
# =====================================================================

VANCOUVER_NIGHTS = {
    "productCode": "120",
    "productName": "Vancouver Nights",
    "name": "Vancouver Nights",
    "productType": "ACTIVITY",
    "advertisedPrice": 150,
    "currency": "CAD",
    "priceOptions": [
        {"id": "adults", "label": "Adult", "price": 150, "seatsUsed": 1},
        {"id": "children", "label": "Child", "price": 75, "seatsUsed": 1},
    ],
    "durationMinutes": 180,
    "bookingMode": "INVENTORY",
}

STANLEY_PARK = {
    "productCode": "121",
    "productName": "Stanley Park Walking Tour",
    "name": "Stanley Park Walking Tour",
    "productType": "ACTIVITY",
    "advertisedPrice": 50,
    "currency": "CAD",
    "priceOptions": [
        {"id": "adults", "label": "Adult", "price": 50, "seatsUsed": 1},
    ],
    "durationMinutes": 120,
    "bookingMode": "INVENTORY",
}

PRODUCTS = {"requestStatus": OK, "products": [VANCOUVER_NIGHTS, STANLEY_PARK]}
SINGLE_PRODUCT = {"requestStatus": OK, "product": VANCOUVER_NIGHTS}
NO_PRODUCTS = {"requestStatus": OK, "products": []}


# =====================================================================
# SECTION: AVAILABILITY
# =====================================================================

PRICE_OPTIONS = [
    {"id": "adults", "label": "Adult", "price": 150, "seatsUsed": 1},
    {"id": "children", "label": "Child", "price": 75, "seatsUsed": 1},
]

SESSION_EVENING = {
    "sessionId": "f4aca5e5f308fa1a9ed0581470cd3b76ab6fd0a5",
    "productCode": "120",
    "startTimeLocal": "2026-03-15T18:00:00",
    "endTimeLocal": "2026-03-15T21:00:00",
    "status": "AVAILABLE",
    "seatsAvailable": 10,
    "allDay": False,
    "priceOptions": PRICE_OPTIONS,
}

SESSION_NEXT_DAY = {
    "sessionId": "a2bcd3e4f506fa1a9ed0581470cd3b76ab7fe0b6",
    "productCode": "120",
    "startTimeLocal": "2026-03-16T18:00:00",
    "endTimeLocal": "2026-03-16T21:00:00",
    "status": "FREESALE",
    "seatsAvailable": 8,
    "allDay": False,
    "priceOptions": PRICE_OPTIONS,
}

SESSION_SOLD_OUT = {
    "sessionId": "sold-out",
    "productCode": "120",
    "startTimeLocal": "2026-03-17T18:00:00",
    "status": "SOLD_OUT",
    "seatsAvailable": 0,
    "priceOptions": PRICE_OPTIONS,
}

SESSION_NO_START = {
    "sessionId": "no-start",
    "productCode": "120",
    "status": "AVAILABLE",
    "seatsAvailable": 4,
    "priceOptions": PRICE_OPTIONS,
}

SESSIONS = {
    "requestStatus": OK,
    "sessions": [SESSION_EVENING, SESSION_NEXT_DAY, SESSION_SOLD_OUT, SESSION_NO_START],
}

NO_SESSIONS = {"requestStatus": {"success": False, "error": {"errorCode": "3", "errorMessage": "No sessions"}}}

PICKUPS = {
    "requestStatus": OK,
    "pickupLocations": [
        {"locationName": "Hotel Vancouver", "pickupInstructions": "Front entrance", "pickupTime": "17:30"},
        {"locationName": "Waterfront Station", "pickupInstructions": "Bus bay 3", "pickupTime": "17:45"},
    ],
}


# =====================================================================
# SECTION: BOOKINGS
# =====================================================================

BOOKING_CONFIRMED = {
    "orderNumber": "REZDY-12345",
    "id": "booking-id-12345",
    "status": "CONFIRMED",
    "customer": {
        "firstName": "John",
        "lastName": "Doe",
        "email": "john.doe@example.com",
        "phone": "+1234567890",
    },
    "items": [
        {
            "productCode": "120",
            "productName": "Vancouver Nights",
            "startTimeLocal": "2026-03-15T18:00:00",
            "endTimeLocal": "2026-03-15T21:00:00",
            "quantities": [{"optionLabel": "Adult", "value": 2}],
        }
    ],
    "totalAmount": 300,
    "totalPaid": 300,
    "totalCurrency": "CAD",
    "dateCreated": "2026-01-16T10:00:00Z",
    "resellerReference": "ABC-1",
    "internalNotes": "window seat",
}

BOOKING_OTHER = {
    "orderNumber": "REZDY-99999",
    "status": "CONFIRMED",
    "customer": {"firstName": "Jane", "lastName": "Roe"},
    "items": [{"productCode": "121", "startTimeLocal": "2026-03-20T09:00:00", "quantities": []}],
}

BOOKING_CANCELLED = {
    "orderNumber": "REZDY-12345",
    "id": "booking-id-12345",
    "status": "CANCELLED",
    "cancellable": True,
    "cancellationDate": "2026-01-16T11:00:00Z",
    "cancellationReason": "Customer requested cancellation",
}

CREATE_BOOKING = {"requestStatus": OK, "booking": BOOKING_CONFIRMED}
CANCEL_BOOKING = {"requestStatus": OK, "booking": BOOKING_CANCELLED}
SINGLE_BOOKING = {"requestStatus": OK, "booking": BOOKING_CONFIRMED}
BOOKING_LIST = {"requestStatus": OK, "bookings": [BOOKING_CONFIRMED]}
BOOKING_LIST_TWO = {"requestStatus": OK, "bookings": [BOOKING_CONFIRMED, BOOKING_OTHER]}

NOT_FOUND = {"requestStatus": {"success": False, "error": {"errorCode": "10", "errorMessage": "No order found"}}}
API_ERROR = {"requestStatus": {"success": False, "error": {"errorCode": "4", "errorMessage": "Invalid API key"}}}
