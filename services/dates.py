"""services/dates.py - Caller date parsing (moment-style dateFormat tokens) into local Rezdy dates."""

import re
from datetime import date, datetime
from typing import Any, Optional

from errors import ValidationError

DEFAULT_DATE_FORMAT = "YYYY-MM-DD"

_MOMENT_TOKEN = re.compile(r"YYYY|YY|MM|M|DD|D|HH|mm|ss")
_STRPTIME = {
    "YYYY": "%Y",
    "YY": "%y",
    "MM": "%m",
    "M": "%m",
    "DD": "%d",
    "D": "%d",
    "HH": "%H",
    "mm": "%M",
    "ss": "%S",
}


def moment_to_strptime(fmt: str) -> str:
    """'DD/MM/YYYY' -> '%d/%m/%Y'. Literal characters are kept."""
    out = []
    pos = 0
    for m in _MOMENT_TOKEN.finditer(fmt):
        out.append(fmt[pos:m.start()].replace("%", "%%"))
        out.append(_STRPTIME[m.group(0)])
        pos = m.end()
    out.append(fmt[pos:].replace("%", "%%"))
    return "".join(out)


def parse_local_date(value: Any, date_format: Optional[str] = None) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if value is None or str(value).strip() == "":
        raise ValidationError(f"invalid date: {value!r}")

    raw = str(value).strip()
    try:
        return datetime.strptime(raw, moment_to_strptime(date_format or DEFAULT_DATE_FORMAT)).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        raise ValidationError(f"invalid date {raw!r} for format {date_format or DEFAULT_DATE_FORMAT!r}")
