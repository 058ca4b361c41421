from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Callable, List, Optional, Tuple

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
_FULL_NAMES = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]

CANONICAL_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")  # use with fullmatch


class DateFormatError(ValueError):
    """Raised when a loosely-formatted date string matches none of the known layouts."""


def _year(raw: str) -> int:
    # Two-digit years pivot at 50: 00-49 -> 20xx, 50-99 -> 19xx
    y = int(raw)
    if len(raw) <= 2:
        return 2000 + y if y < 50 else 1900 + y
    return y


def _month_name(raw: str) -> Optional[int]:
    key = raw[:3].lower()
    m = _MONTHS.get(key)
    if m is None:
        return None
    # accept "Feb", "Feb.", "February", "Sept"; reject "Febtember"
    full = raw.rstrip(".").lower()
    return m if len(full) <= 4 or _FULL_NAMES[m - 1].startswith(full) else None


# (year, month, day); month is None for an unknown month name
_Parsed = Tuple[int, Optional[int], int]

_LAYOUTS: List[Tuple[re.Pattern, Callable[[re.Match], _Parsed]]] = [
    # 2017-02-27, 2017/02/27
    (re.compile(r"^(\d{4})[-/](\d{1,2})[-/](\d{1,2})$"),
     lambda m: (int(m.group(1)), int(m.group(2)), int(m.group(3)))),
    # 02/27/2017, 2/27/17, 02-27-2017
    (re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4}|\d{2})$"),
     lambda m: (_year(m.group(3)), int(m.group(1)), int(m.group(2)))),
    # February 27, 2017 / Feb 27 2017 / Feb. 27, 17
    (re.compile(r"^([A-Za-z]+\.?)\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4}|\d{2})$"),
     lambda m: (_year(m.group(3)), _month_name(m.group(1)), int(m.group(2)))),
    # Feb-27-2017 / February-27-17
    (re.compile(r"^([A-Za-z]+)-(\d{1,2})-(\d{4}|\d{2})$"),
     lambda m: (_year(m.group(3)), _month_name(m.group(1)), int(m.group(2)))),
    # 27 February 2017
    (re.compile(r"^(\d{1,2})\s+([A-Za-z]+\.?),?\s+(\d{4})$"),
     lambda m: (_year(m.group(3)), _month_name(m.group(2)), int(m.group(1)))),
]


def _rollover(year: int, month: int, day: int) -> date:
    """
    Build a date, carrying overflowing months into following years and
    overflowing days into following months (04/31 -> 05/01, 13/01 -> next 01/01).
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return date(year, month, 1) + timedelta(days=day - 1)


def normalize_date(raw: str) -> str:
    """
    Normalize a human-entered date to canonical YYYY-MM-DD.

    Accepted layouts: YYYY-MM-DD, MM/DD/YYYY, MM/DD/YY, "Month D, YYYY",
    "Mon D, YYYY", "Mon-DD-YYYY", "D Month YYYY". Calendar-invalid values roll
    forward instead of being rejected, e.g. "April 31, 2017" -> "2017-05-01".

    Raises:
        DateFormatError: blank input, unknown layout, or a zero month/day.
    """
    text = (raw or "").strip()
    if not text:
        raise DateFormatError("empty date string")
    for pattern, extract in _LAYOUTS:
        m = pattern.match(text)
        if m is None:
            continue
        year, month, day = extract(m)
        if month is None:
            raise DateFormatError(f"unknown month name in {raw!r}")
        if month < 1 or day < 1:
            raise DateFormatError(f"month and day must be >= 1 in {raw!r}")
        try:
            return _rollover(year, month, day).isoformat()
        except (ValueError, OverflowError) as e:
            raise DateFormatError(f"cannot represent {raw!r}: {e}") from e
    raise DateFormatError(f"unrecognized date format: {raw!r}")
