"""Search-term proximity value resolution.

Given a free-text term (e.g. "מקדם דחייה"), find the numeric value written
closest after an occurrence of the term. Terms that imply a bounded domain
(coefficients, percentages) are range-filtered, and when nothing in range
is found the result is empty rather than an unrelated value.
"""

import re
from itertools import islice
from typing import Iterator, List, Optional, Tuple

from decision2json.models import ExtractedSection, ExtractedValue
from decision2json.normalizer import normalize_text
from decision2json.numerals import in_range, is_date_like, parse_number, value_range_for_term
from decision2json.patterns import (
    HEBREW_CHARS,
    UNIT_COEFFICIENT,
    UNIT_PERCENT,
    detect_unit,
    is_currency_unit,
)

# Characters inspected after each term occurrence
TERM_WINDOW_CHARS = 150
# Occurrences inspected per variant in a full-document search
MAX_DOCUMENT_OCCURRENCES = 20
MAX_CONTEXT_CHARS = 120

_NUMBER_RE = re.compile(r'\d+(?:[.,]\d+)*')
_HEBREW_WORD_RE = re.compile('[' + HEBREW_CHARS + ']+')
# "3 שנים", "שנה" - year counts, not values
_YEAR_COUNT_RE = re.compile(r'^\s*(?:שנים|שנה)(?![' + HEBREW_CHARS + '])')
_PERCENT_TAIL_RE = re.compile(r'^\s*%')
_FINAL_YH_RE = re.compile(r'יי?ה$')
_WHITESPACE_RE = re.compile(r'\s+')


def generate_term_variants(term: str) -> List[str]:
    """Generate Hebrew spelling variants of a search term.

    Covers the ייה/יה spelling alternation, truncation of a final ייה/יה on
    the last word (so "דחי" matches both "דחייה" and "דחיה") and the
    definite article on the last word ("מקדם דחייה" -> "מקדם הדחייה").
    This is a hand-tuned heuristic, not a stemmer.

    Args:
        term: Search term

    Returns:
        Unique variants, the original term first
    """
    variants = [term]

    if 'ייה' in term:
        variants.append(term.replace('ייה', 'יה'))
    elif 'יה' in term:
        variants.append(term.replace('יה', 'ייה'))

    words = term.split()
    if len(words) >= 2:
        head, last = words[:-1], words[-1]
        if _FINAL_YH_RE.search(last):
            variants.append(' '.join(head + [_FINAL_YH_RE.sub('י', last)]))

        variants.append(' '.join(head + ['ה' + last]))
        if 'ייה' in last:
            variants.append(' '.join(head + ['ה' + last.replace('ייה', 'יה', 1)]))

    return list(dict.fromkeys(variants))


def has_hebrew_words_before(window: str, index: int) -> bool:
    """True when three or more Hebrew words precede index in the window.

    A number that far into running prose is usually a paragraph or clause
    number rather than the value attached to the term.
    """
    return len(_HEBREW_WORD_RE.findall(window[:index])) >= 3


def first_qualifying_number(
    window: str,
    value_range: Optional[Tuple[float, float]] = None,
) -> Optional[Tuple[str, float, int]]:
    """Find the first number in a window that can stand for a term's value.

    Skips dates, year counts, percentages, non-positive values, values
    outside value_range and numbers buried after three Hebrew words.

    Args:
        window: Text following a term occurrence
        value_range: Optional inclusive (min, max) filter

    Returns:
        Tuple of (raw, numeric, offset_in_window), or None
    """
    for match in _NUMBER_RE.finditer(window):
        raw = match.group(0)
        following = window[match.end():match.end() + 12]

        if is_date_like(raw, following):
            continue
        if _YEAR_COUNT_RE.match(following) or _PERCENT_TAIL_RE.match(following):
            continue

        numeric = parse_number(raw)
        if numeric is None or numeric <= 0:
            continue
        if not in_range(numeric, value_range):
            continue
        if has_hebrew_words_before(window, match.start()):
            continue

        return raw, numeric, match.start()

    return None


def primary_value(section: Optional[ExtractedSection]) -> Optional[ExtractedValue]:
    """Pick the representative value of a section.

    Preference: first currency value, then coefficient, then percentage,
    then the first value found.
    """
    if section is None or not section.values:
        return None

    for value in section.values:
        if is_currency_unit(value.unit):
            return value
    for value in section.values:
        if value.unit == UNIT_COEFFICIENT:
            return value
    for value in section.values:
        if value.unit == UNIT_PERCENT:
            return value

    return section.values[0]


def resolve_value_for_term(
    section: Optional[ExtractedSection],
    search_term: Optional[str],
) -> Optional[ExtractedValue]:
    """Get the value of a section most relevant to a search term.

    The nearest qualifying number after any variant of the term wins. With
    no term, or no match for an unbounded term, the section's primary value
    is returned. For bounded terms (coefficient, percentage) no match means
    None.

    Args:
        section: Extracted section (may be None)
        search_term: Free-text term

    Returns:
        ExtractedValue or None
    """
    if section is None:
        return None
    term = normalize_text(search_term or "").strip()
    if not term or not section.text:
        return primary_value(section)

    value_range = value_range_for_term(term)
    best = _nearest_candidate(section.text, term, value_range, section.text_offset)

    if best is not None:
        return best
    if value_range is not None:
        return None
    return primary_value(section)


def resolve_value_from_full_document(text: str, search_term: Optional[str]) -> Optional[ExtractedValue]:
    """Last-resort search for a term's value across the whole document.

    Only the first MAX_DOCUMENT_OCCURRENCES occurrences of each variant are
    inspected. The engine cannot tell which party such a value belongs to;
    callers report it as unattributed.

    Args:
        text: Raw or normalized document text
        search_term: Free-text term

    Returns:
        ExtractedValue nearest to an occurrence of the term, or None
    """
    if not text or not search_term:
        return None
    term = normalize_text(search_term).strip()
    if not term:
        return None

    text = normalize_text(text)
    value_range = value_range_for_term(term)
    return _nearest_candidate(text, term, value_range, 0, MAX_DOCUMENT_OCCURRENCES)


def _nearest_candidate(
    text: str,
    term: str,
    value_range: Optional[Tuple[float, float]],
    base_offset: int,
    max_occurrences: Optional[int] = None,
) -> Optional[ExtractedValue]:
    best: Optional[ExtractedValue] = None
    best_distance: Optional[int] = None

    for variant in generate_term_variants(term):
        for found in islice(_occurrences(text, variant), max_occurrences):
            window_start = found + len(variant)
            window = text[window_start:window_start + TERM_WINDOW_CHARS]
            candidate = first_qualifying_number(window, value_range)
            if candidate is None:
                continue

            raw, numeric, distance = candidate
            if best_distance is not None and distance >= best_distance:
                continue

            number_start = window_start + distance
            context_start = max(0, found - 20)
            context_end = min(len(text), number_start + len(raw) + 30)
            context = _WHITESPACE_RE.sub(' ', text[context_start:context_end]).strip()[:MAX_CONTEXT_CHARS]

            # Bounded terms display as plain decimals
            unit = UNIT_COEFFICIENT if value_range is not None else detect_unit(context)

            best = ExtractedValue(
                raw=raw,
                numeric=numeric,
                unit=unit,
                context=context,
                char_index=base_offset + number_start,
            )
            best_distance = distance

    return best


def _occurrences(text: str, needle: str) -> Iterator[int]:
    """Yield every (possibly overlapping) start index of needle in text."""
    if not needle:
        return
    index = text.find(needle)
    while index != -1:
        yield index
        index = text.find(needle, index + 1)
