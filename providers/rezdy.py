"""
providers/rezdy.py

Rezdy API helpers:
- Endpoint validation
- Header building and redaction
- Low-level HTTP wrapper (RezdyClient.request) with upstream error classification
- "No order found" sentinel detection
- Credential template exposed to the hosting platform

The client owns its requests.Session. Request/response hooks are passed per
request, so nothing outside this object is mutated.
"""

import re
from typing import Any, Callable, Dict, Optional, Tuple
from urllib.parse import parse_qsl, urlencode, urlparse, urlsplit, urlunsplit

import requests

from config import (
    REZDY_DEBUG,
    REZDY_DEFAULT_ENDPOINT,
    REZDY_HTTP_TIMEOUT,
    REZDY_NOT_FOUND_ERROR_CODE,
    REZDY_NOT_FOUND_MESSAGE,
)
from errors import InvalidEndpoint, UpstreamApiError

EventSink = Callable[[str, Dict[str, Any]], None]

SENSITIVE_HEADERS = {"apikey", "authorization", "x-api-key", "cookie", "set-cookie"}
SENSITIVE_PARAMS = {"apikey", "api_key", "key"}
REDACTED = "***"

HEX_PATTERN = re.compile(r"^[a-fA-F0-9]+$")


# =====================================================================
# SECTION: ENDPOINT + CREDENTIALS
# =====================================================================

def validate_endpoint(endpoint: Any, default: Optional[str] = None) -> str:
    """
    Absent or empty -> the instance default, else the production default.
    Anything else must be a string holding an absolute URL, returned unchanged.
    """
    if endpoint is None or (isinstance(endpoint, str) and endpoint == ""):
        return default or REZDY_DEFAULT_ENDPOINT
    if not isinstance(endpoint, str):
        raise InvalidEndpoint(endpoint)
    try:
        parsed = urlparse(endpoint)
    except ValueError:
        raise InvalidEndpoint(endpoint)
    if not parsed.scheme or not parsed.netloc or " " in endpoint:
        raise InvalidEndpoint(endpoint)
    return endpoint


def token_template() -> Dict[str, Dict[str, Any]]:
    return {
        "apiKey": {
            "type": "text",
            "regExp": HEX_PATTERN,
            "description": "the Api Key provided from Rezdy, should be in uuid format",
        },
        "resellerId": {
            "type": "text",
            "regExp": HEX_PATTERN,
            "description": "the Reseller Id provided from Rezdy, should be in uuid format",
        },
    }


def rezdy_headers(api_key: Optional[str]) -> Dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["apiKey"] = api_key
    return headers


# =====================================================================
# SECTION: REDACTION
# =====================================================================

def redact_headers(headers: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        k: (REDACTED if str(k).lower() in SENSITIVE_HEADERS else v)
        for k, v in dict(headers or {}).items()
    }


def redact_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return url
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (k, REDACTED if k.lower() in SENSITIVE_PARAMS else v)
        for k, v in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="*")))


def redact_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        k: (REDACTED if str(k).lower() in SENSITIVE_PARAMS else v)
        for k, v in dict(params or {}).items()
    }


# =====================================================================
# SECTION: ERROR CLASSIFICATION
# =====================================================================

def failed_request_status(data: Any) -> Optional[Dict[str, Any]]:
    """The requestStatus dict when the body reports success=false, else None."""
    if not isinstance(data, dict):
        return None
    status = data.get("requestStatus")
    if isinstance(status, dict) and status.get("success") is False:
        return status
    return None


def _error_parts(data: Any) -> Tuple[str, Any, Optional[str]]:
    """(message, details, error_code) pulled from an upstream error body."""
    if not isinstance(data, dict):
        return "Rezdy request failed", data, None

    status = data.get("requestStatus") if isinstance(data.get("requestStatus"), dict) else {}
    error = status.get("error") if isinstance(status.get("error"), dict) else None
    details = data.get("details") or error or data

    code = None
    message = None
    if error:
        code = error.get("errorCode")
        message = error.get("errorMessage")
    if message is None and isinstance(data.get("details"), dict):
        message = data["details"].get("message")
    if message is None:
        message = data.get("message") or data.get("error")

    return str(message or "Rezdy request failed"), details, (str(code) if code is not None else None)


def is_not_found(err: BaseException) -> bool:
    """True for the upstream "no order found" business error."""
    if not isinstance(err, UpstreamApiError):
        return False
    if err.error_code is not None and str(err.error_code) == str(REZDY_NOT_FOUND_ERROR_CODE):
        return True
    return REZDY_NOT_FOUND_MESSAGE in (err.message or "").lower()


# =====================================================================
# SECTION: LOW LEVEL HTTP CLIENT
# =====================================================================

class RezdyClient:
    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = REZDY_HTTP_TIMEOUT,
        events: Optional[EventSink] = None,
        name: str = "rezdy",
        debug: bool = REZDY_DEBUG,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.events = events
        self.name = name
        self.debug = debug

    def _emit(self, suffix: str, data: Dict[str, Any]) -> None:
        if self.events:
            self.events(f"{self.name}.{suffix}", data)

    def _on_response(self, response, *args, **kwargs):
        req = getattr(response, "request", None)
        self._emit("response", {
            "status": response.status_code,
            "url": redact_url(getattr(response, "url", None)),
            "headers": redact_headers(getattr(response, "headers", None)),
            "request": {
                "method": getattr(req, "method", None),
                "url": redact_url(getattr(req, "url", None)),
                "headers": redact_headers(getattr(req, "headers", None)),
            },
        })
        return response

    def request(
        self,
        method: str,
        url: str,
        api_key: Optional[str] = None,
        params: Optional[dict] = None,
        payload: Optional[dict] = None,
        allow_failed_status: bool = False,
    ) -> Any:
        """
        Issue one call and return the decoded JSON body.

        Raises UpstreamApiError for transport failures, HTTP >= 400, and for
        requestStatus.success == false bodies unless allow_failed_status is set
        (availability and pickup lookups classify those themselves).
        """
        method = method.upper()
        headers = rezdy_headers(api_key)
        path = urlparse(url).path

        self._emit("request", {
            "method": method,
            "url": redact_url(url),
            "params": redact_params(params),
            "headers": redact_headers(headers),
            "data": payload,
        })
        if self.debug:
            print(f"[{self.name}] {method} {redact_url(url)} params={redact_params(params)} payload_keys={list((payload or {}).keys())}")

        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                json=payload,
                headers=headers,
                timeout=self.timeout,
                hooks={"response": self._on_response},
            )
        except requests.RequestException as e:
            print(f"[{self.name}] {method} {path} transport error: {e}")
            self._emit("error", {"request": {"method": method, "url": redact_url(url)}, "err": str(e)})
            raise UpstreamApiError(f"Rezdy request failed: {e}", status_code=502, details=str(e))

        try:
            data = resp.json()
        except ValueError:
            data = {"raw": resp.text}

        if resp.status_code >= 400:
            safe_body = (resp.text or "").replace("\n", "\\n").replace("\r", "\\r")
            print(f"[{self.name}] {method} {path} status={resp.status_code} body={safe_body[:1200]}")
            message, details, code = _error_parts(data)
            self._emit("error", {"request": {"method": method, "url": redact_url(url)}, "err": details})
            raise UpstreamApiError(message, status_code=resp.status_code, details=details, error_code=code)

        print(f"[{self.name}] {method} {path} status={resp.status_code}")

        if not allow_failed_status and failed_request_status(data) is not None:
            message, details, code = _error_parts(data)
            self._emit("error", {"request": {"method": method, "url": redact_url(url)}, "err": details})
            raise UpstreamApiError(message, details=details, error_code=code)

        return data

    def get(self, url: str, api_key: Optional[str] = None, params: Optional[dict] = None, **kwargs) -> Any:
        return self.request("GET", url, api_key=api_key, params=params, **kwargs)

    def post(self, url: str, payload: dict, api_key: Optional[str] = None, **kwargs) -> Any:
        return self.request("POST", url, api_key=api_key, payload=payload, **kwargs)

    def delete(self, url: str, api_key: Optional[str] = None, **kwargs) -> Any:
        return self.request("DELETE", url, api_key=api_key, **kwargs)
