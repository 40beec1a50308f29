"""
config.py

Single source of truth for:
- Environment variable reads
- Rezdy connector defaults (endpoint, signing secret, fan-out cap)
- Upstream sentinel values

Nothing here should contain request handling or business logic beyond config resolution.
"""

import os
from typing import List


# =====================================================================
# SECTION: ENV VARS
# =====================================================================

# Production default, used when neither the token nor the instance sets one.
REZDY_DEFAULT_ENDPOINT = "https://api.rezdy.com/v1"
REZDY_ENDPOINT = (os.getenv("REZDY_ENDPOINT") or "").strip() or None

# Secret used to sign availability keys. searchAvailability refuses to run without it.
REZDY_JWT_KEY = os.getenv("REZDY_JWT_KEY") or None
REZDY_JWT_ALGORITHM = "HS256"

REZDY_DEBUG = os.getenv("REZDY_DEBUG", "false").lower() == "true"

# Upstream rate limits are per API key; keep fan-out small.
REZDY_CONCURRENCY = int(os.getenv("REZDY_CONCURRENCY", "3"))
REZDY_HTTP_TIMEOUT = float(os.getenv("REZDY_HTTP_TIMEOUT", "30"))

# requestStatus.error.errorCode returned when a booking lookup matches nothing
REZDY_NOT_FOUND_ERROR_CODE = os.getenv("REZDY_NOT_FOUND_ERROR_CODE", "10")
REZDY_NOT_FOUND_MESSAGE = "no order found"

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")


# =====================================================================
# SECTION: BOOKING DEFAULTS
# =====================================================================

DEFAULT_PAYMENT_TYPE = "CASH"
DEFAULT_PAYMENT_RECIPIENT = "SUPPLIER"
DEFAULT_PAYMENT_LABEL = "Payment"
DEFAULT_UNIT_LABEL = "Adult"
DEFAULT_OPTION_ID = "default"

# Holder email sentinel meaning "do not capture email"
EMAIL_COLLECT_SENTINEL = "collect"


# =====================================================================
# SECTION: HELPERS
# =====================================================================

def get_cors_origins() -> List[str]:
    """Comma-separated CORS_ORIGINS as a list, '*' by default."""
    raw = os.getenv("CORS_ORIGINS", CORS_ORIGINS) or "*"
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]
