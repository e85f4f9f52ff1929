"""Numeral parsing and validity filters for Hebrew decision text."""

import math
import re
from typing import Optional, Tuple

# "1,250,000" - comma as thousands separator
_THOUSANDS_RE = re.compile(r'^\d{1,3}(?:,\d{3})+$')
# "0,85" / "12,5" - comma as decimal separator
_DECIMAL_COMMA_RE = re.compile(r'^\d+,\d{1,2}$')

# "15.03.2019"
_DATE_RE = re.compile(r'^\d{1,2}\.\d{1,2}\.\d{4}$')
# ".2019" right after a numeral ("15.03" + ".2019")
_YEAR_TAIL_RE = re.compile(r'^\.\d{4}')

# Search terms implying a bounded value domain, checked in order
VALUE_RANGES: Tuple[Tuple[str, Tuple[float, float]], ...] = (
    ('מקדם', (0.01, 2.5)),
    ('אחוז', (0.0, 100.0)),
    ('שיעור', (0.0, 100.0)),
)


def parse_number(raw: str) -> Optional[float]:
    """Parse a numeral that may use a comma as thousands or decimal separator.

    Args:
        raw: Numeral string (e.g. "1,250,000", "0,85", "3.5")

    Returns:
        Parsed value, or None if the string does not yield a finite number
    """
    if not raw:
        return None
    trimmed = raw.strip()

    if _THOUSANDS_RE.match(trimmed):
        candidate = trimmed.replace(',', '')
    elif _DECIMAL_COMMA_RE.match(trimmed):
        candidate = trimmed.replace(',', '.')
    else:
        candidate = trimmed.replace(',', '')

    try:
        value = float(candidate)
    except (ValueError, OverflowError):
        return None

    if not math.isfinite(value):
        return None
    return value


def is_date_like(raw: str, following: str = "") -> bool:
    """Check whether a numeral is (part of) a DD.MM.YYYY date.

    Args:
        raw: The matched numeral
        following: Text immediately after the numeral

    Returns:
        True if the numeral should be treated as a date
    """
    return bool(_DATE_RE.match(raw) or _YEAR_TAIL_RE.match(following))


def value_range_for_term(term: Optional[str]) -> Optional[Tuple[float, float]]:
    """Return the valid (min, max) range implied by a search term, if any."""
    if not term:
        return None
    for keyword, bounds in VALUE_RANGES:
        if keyword in term:
            return bounds
    return None


def in_range(value: float, bounds: Optional[Tuple[float, float]]) -> bool:
    if bounds is None:
        return True
    return bounds[0] <= value <= bounds[1]
