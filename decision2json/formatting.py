"""Display helpers for extracted values."""

import math
from typing import Optional

from decision2json.models import ExtractedValue
from decision2json.patterns import (
    UNIT_COEFFICIENT,
    UNIT_CURRENCY,
    UNIT_PER_DUNAM,
    UNIT_PER_SQM,
    UNIT_PER_UNIT,
    UNIT_PERCENT,
)

# Units shown after the number separated by a space
_SPACED_SUFFIX_UNITS = (UNIT_PER_SQM, UNIT_PER_DUNAM, UNIT_PER_UNIT, UNIT_CURRENCY)


def format_number(value: float) -> str:
    """Format a number the way he-IL displays it: 1,250,000 / 0.85 / 12.346."""
    if not math.isfinite(value):
        return str(value)
    formatted = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if formatted in ("", "-0") else formatted


def format_extracted_value(value: ExtractedValue) -> str:
    """Format a value for display with its unit suffix."""
    formatted = format_number(value.numeric)

    if value.unit in _SPACED_SUFFIX_UNITS:
        return f"{formatted} {value.unit}"
    if value.unit == UNIT_PERCENT:
        return f"{formatted}%"
    # Coefficients and unit-less values are bare numbers
    return formatted


def format_optional_value(value: Optional[ExtractedValue]) -> Optional[str]:
    return format_extracted_value(value) if value is not None else None


def estimate_page(char_index: int, total_length: int, chars_per_page: int = 3000) -> int:
    """Estimate the 1-based page a character offset falls on.

    Args:
        char_index: Offset in the document (-1 when unknown)
        total_length: Document length in characters
        chars_per_page: Assumed characters per page

    Returns:
        Estimated page number (1 when the offset is unknown)
    """
    if char_index < 0 or total_length <= 0:
        return 1
    total_pages = max(1, math.ceil(total_length / chars_per_page))
    page = math.ceil(((char_index + 1) / total_length) * total_pages)
    return min(total_pages, max(1, page))
