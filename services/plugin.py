"""
services/plugin.py

Rezdy connector facade. Every public operation takes keyword arguments
token=, payload=, projection= and returns a plain dict ({products},
{availability}, {booking}, {cancellation}, {bookings}, {quote}) or a bool.

Flow per operation:
1) Coerce the payload into its pydantic model (input errors -> ValidationError)
2) Run local validation and projection checks (no network yet)
3) Resolve endpoint + apiKey from the token
4) Call Rezdy through the instance's RezdyClient
5) Translate and project each record
"""

from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from config import REZDY_CONCURRENCY, REZDY_DEBUG, REZDY_ENDPOINT, REZDY_HTTP_TIMEOUT, REZDY_JWT_KEY
from errors import ConfigurationError, InvalidBookingId, ValidationError
from providers import rezdy
from providers.rezdy import RezdyClient
from providers.translate import check_fields, project, translate_booking, translate_product
from schemas.availability import Availability
from schemas.bookings import Booking
from schemas.payloads import (
    AvailabilityPayload,
    CancelBookingPayload,
    CreateBookingPayload,
    ProductSearchPayload,
    ProjectionContext,
    QuotePayload,
    SearchBookingPayload,
    Token,
)
from schemas.products import Product
from schemas.rates import Rate
from services import availability_service
from services.availability_key import decode_availability_key
from services.availability_service import collect_availability
from services.booking_builder import build_booking_request, validate_booking_payload
from services.booking_search import search_bookings, validate_search_payload
from wildcard import wildcard_match

M = TypeVar("M", bound=BaseModel)


def _coerce(model_cls: Type[M], data: Any) -> M:
    if isinstance(data, model_cls):
        return data
    try:
        return model_cls.model_validate(data or {})
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'payload'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(f"invalid {model_cls.__name__}: {problems}")


def _projection(projection: Union[ProjectionContext, Dict[str, Any], None]) -> ProjectionContext:
    if projection is None:
        return ProjectionContext()
    return _coerce(ProjectionContext, projection)


def products_of(data: Any) -> List[dict]:
    """products list, a single product under `products` or `product`, else []."""
    if not isinstance(data, dict):
        return []
    products = data.get("products")
    if isinstance(products, list):
        return [p for p in products if isinstance(p, dict)]
    if isinstance(products, dict):
        return [products]
    if isinstance(data.get("product"), dict):
        return [data["product"]]
    return []


def matches_filters(product: Dict[str, Any], filters: Dict[str, Any]) -> bool:
    # only string filters constrain; other values are accepted as-is
    return all(
        wildcard_match(value, product.get(key)) if isinstance(value, str) else True
        for key, value in filters.items()
    )


class Plugin:
    def __init__(
        self,
        endpoint: Optional[str] = None,
        jwt_key: Optional[str] = REZDY_JWT_KEY,
        events: Any = None,
        session=None,
        concurrency: int = REZDY_CONCURRENCY,
        timeout: float = REZDY_HTTP_TIMEOUT,
        name: str = "rezdy",
        debug: bool = REZDY_DEBUG,
    ):
        self.name = name
        self.endpoint = rezdy.validate_endpoint(endpoint or REZDY_ENDPOINT)
        self.jwt_key = jwt_key
        self.concurrency = max(1, int(concurrency or 1))
        sink = getattr(events, "emit", events)
        self.client = RezdyClient(session=session, timeout=timeout, events=sink, name=name, debug=debug)

    # =====================================================================
    # SECTION: HELPERS EXPOSED TO THE HOST
    # =====================================================================

    def validate_endpoint(self, endpoint: Any = None) -> str:
        return rezdy.validate_endpoint(endpoint, default=self.endpoint)

    @staticmethod
    def calculate_seats_available(record: Any) -> int:
        return availability_service.calculate_seats_available(record)

    @staticmethod
    def extract_availability_data(data: Any, product_id: Any = None) -> List[Any]:
        return availability_service.extract_availability_data(data, product_id)

    @staticmethod
    def token_template() -> Dict[str, Dict[str, Any]]:
        return rezdy.token_template()

    def _resolve(self, token: Any):
        tok = _coerce(Token, token)
        return tok, self.validate_endpoint(tok.endpoint)

    def _project_availability(self, avail: Availability, proj: ProjectionContext) -> Dict[str, Any]:
        data = project(avail, proj.availability)
        if proj.rate is not None and "rates" in data:
            data["rates"] = [project(r, proj.rate) for r in avail.rates]
        return data

    def _check_availability_projection(self, proj: ProjectionContext) -> None:
        check_fields(Availability, proj.availability)
        check_fields(Rate, proj.rate)

    # =====================================================================
    # SECTION: OPERATIONS
    # =====================================================================

    def validate_token(self, token: Any = None, **_) -> bool:
        """True when the credentials list at least one product. Never raises."""
        try:
            tok, endpoint = self._resolve(token)
            data = self.client.get(f"{endpoint}/products", api_key=tok.apiKey)
        except Exception as e:
            print(f"[{self.name}] validate_token failed: {e}")
            return False
        products = data.get("products") if isinstance(data, dict) else None
        return isinstance(products, list) and len(products) > 0

    def search_products(self, token: Any = None, payload: Any = None, projection: Any = None) -> Dict[str, Any]:
        payload = _coerce(ProductSearchPayload, payload)
        proj = _projection(projection)
        check_fields(Product, proj.product)
        tok, endpoint = self._resolve(token)

        url = f"{endpoint}/products"
        if payload.productId not in (None, ""):
            url = f"{url}/{payload.productId}"
        data = self.client.get(url, api_key=tok.apiKey)

        products = [project(translate_product(p), proj.product) for p in products_of(data)]
        filters = payload.extra_filters()
        if filters:
            products = [p for p in products if matches_filters(p, filters)]
        return {"products": products}

    def search_quote(self, token: Any = None, payload: Any = None, projection: Any = None) -> Dict[str, Any]:
        # Rezdy has no quote endpoint
        _coerce(QuotePayload, payload)
        return {"quote": []}

    def search_availability(self, token: Any = None, payload: Any = None, projection: Any = None) -> Dict[str, Any]:
        if not self.jwt_key:
            raise ConfigurationError("JWT secret should be set")
        return self._availability(token, payload, projection)

    def availability_calendar(self, token: Any = None, payload: Any = None, projection: Any = None) -> Dict[str, Any]:
        """Same sessions as search_availability; keys are null when no secret is configured."""
        return self._availability(token, payload, projection)

    def _availability(self, token: Any, payload: Any, projection: Any) -> Dict[str, Any]:
        payload = _coerce(AvailabilityPayload, payload)
        proj = _projection(projection)
        self._check_availability_projection(proj)
        availability_service.validate_availability_payload(payload)
        tok, endpoint = self._resolve(token)

        groups = collect_availability(
            self.client,
            endpoint,
            tok.apiKey,
            payload,
            jwt_key=self.jwt_key,
            concurrency=self.concurrency,
        )
        return {"availability": [
            [self._project_availability(a, proj) for a in group]
            for group in groups
        ]}

    def create_booking(self, token: Any = None, payload: Any = None, projection: Any = None) -> Dict[str, Any]:
        payload = _coerce(CreateBookingPayload, payload)
        validate_booking_payload(payload)
        proj = _projection(projection)
        check_fields(Booking, proj.booking)
        tok, endpoint = self._resolve(token)

        key_payload = decode_availability_key(payload.availabilityKey, self.jwt_key)
        body = build_booking_request(key_payload, payload, reseller_id=tok.resellerId)
        data = self.client.post(f"{endpoint}/bookings", body, api_key=tok.apiKey)
        return {"booking": project(translate_booking(data, endpoint), proj.booking)}

    def cancel_booking(self, token: Any = None, payload: Any = None, projection: Any = None) -> Dict[str, Any]:
        payload = _coerce(CancelBookingPayload, payload)
        booking_id = payload.bookingId if payload.bookingId not in (None, "") else payload.id
        if booking_id is None or str(booking_id).strip() == "":
            raise InvalidBookingId()
        proj = _projection(projection)
        check_fields(Booking, proj.booking)
        tok, endpoint = self._resolve(token)

        data = self.client.delete(f"{endpoint}/bookings/{booking_id}/cancel", api_key=tok.apiKey)
        return {"cancellation": project(translate_booking(data, endpoint), proj.booking)}

    def search_booking(self, token: Any = None, payload: Any = None, projection: Any = None) -> Dict[str, Any]:
        payload = _coerce(SearchBookingPayload, payload)
        validate_search_payload(payload)
        proj = _projection(projection)
        check_fields(Booking, proj.booking)
        tok, endpoint = self._resolve(token)

        records = search_bookings(self.client, endpoint, tok.apiKey, payload, concurrency=self.concurrency)
        bookings = [project(translate_booking(b, endpoint), proj.booking) for b in records]
        return {"bookings": [b for b in bookings if b is not None]}
