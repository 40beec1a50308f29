"""
errors.py

Error kinds raised by the Rezdy connector.

All of them are HTTPException subclasses so the FastAPI layer renders them
directly, the same way provider helpers raise HTTPException for upstream
failures. Validation errors are raised before any network call.
"""

from typing import Any, Optional

from fastapi import HTTPException


class PluginError(HTTPException):
    status_code_default = 500

    def __init__(self, message: str, status_code: Optional[int] = None, detail: Any = None):
        super().__init__(
            status_code=status_code or self.status_code_default,
            detail=detail if detail is not None else message,
        )
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidEndpoint(PluginError):
    status_code_default = 400

    def __init__(self, endpoint: Any):
        super().__init__(f"Invalid endpoint URL: {endpoint!r}")
        self.endpoint = endpoint


class ConfigurationError(PluginError):
    status_code_default = 500


# ---------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------

class ValidationError(PluginError):
    status_code_default = 400


class MissingAvailabilityKey(ValidationError):
    def __init__(self):
        super().__init__("an availability code is required")


class MissingHolderName(ValidationError):
    def __init__(self):
        super().__init__("a holder's first name is required")


class MissingHolderSurname(ValidationError):
    def __init__(self):
        super().__init__("a holder's surname is required")


class LengthMismatch(ValidationError):
    pass


class MissingSearchParameters(ValidationError):
    def __init__(self):
        super().__init__("at least one parameter is required")


class InvalidBookingId(ValidationError):
    def __init__(self):
        super().__init__("Invalid booking id")


# ---------------------------------------------------------------------
# Availability key / upstream / projection
# ---------------------------------------------------------------------

class InvalidAvailabilityKey(PluginError):
    status_code_default = 400

    def __init__(self, reason: str):
        super().__init__(f"invalid availability key: {reason}")


class UpstreamApiError(PluginError):
    """
    Upstream reported an error. `details` is the upstream error object when
    the body carried one, otherwise the raw transport error text.
    """
    status_code_default = 502

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message, status_code=status_code, detail=details if details is not None else message)
        self.details = details
        self.error_code = error_code


class SearchExhausted(PluginError):
    status_code_default = 502

    def __init__(self, errors=None):
        super().__init__("booking search failed due to API errors")
        self.errors = list(errors or [])


class ProjectionError(PluginError):
    status_code_default = 400

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))
