"""wildcard.py - Case-insensitive '*' / '?' pattern matching for product filters."""

import re
from typing import Any


def wildcard_match(pattern: str, value: Any) -> bool:
    """
    '*' matches any run of characters, '?' exactly one. Everything else is literal.

      wildcard_match("*night*", "Vancouver Nights") -> True
      wildcard_match("tour?", "tours1")             -> False
    """
    if value is None:
        return False
    regex = "".join(
        ".*" if ch == "*" else "." if ch == "?" else re.escape(ch)
        for ch in pattern
    )
    return re.fullmatch(regex, str(value), flags=re.IGNORECASE | re.DOTALL) is not None
