"""Section and value extraction from appraisal decision text."""

import re
from typing import List, NamedTuple, Optional, Set, Tuple

from loguru import logger

from decision2json.models import (
    DocumentExtraction, ExtractedSection, ExtractedValue, SectionType
)
from decision2json.normalizer import normalize_text
from decision2json.numerals import is_date_like, parse_number, value_range_for_term
from decision2json.patterns import (
    ALL_HEADER_REGEXES,
    HEADER_REGEXES,
    KEYWORD_FALLBACKS,
    VALUE_PATTERNS,
    detect_unit,
)
from decision2json.resolver import MAX_CONTEXT_CHARS, TERM_WINDOW_CHARS, first_qualifying_number


# Shorter documents are not worth pattern work
MIN_DOCUMENT_CHARS = 100
MAX_SECTION_CHARS = 8000
MIN_SECTION_CHARS = 20

# Keyword fallback window
FALLBACK_SEARCH_CHARS = 50000
FALLBACK_CHARS_BEFORE = 500
FALLBACK_CHARS_AFTER = 2500
MIN_FALLBACK_CHARS = 30

# Context kept on each side of a value match
VALUE_CONTEXT_CHARS = 40

# Window scanned after a search term occurrence for extract_sections(search_term=...)
NEAR_TERM_WINDOW_CHARS = 100
MAX_NEAR_TERM_OCCURRENCES = 20

# Section fields in extraction order
SECTION_FIELDS: Tuple[Tuple[str, SectionType], ...] = (
    ("party_a", SectionType.PARTY_A),
    ("party_b", SectionType.PARTY_B),
    ("ruling", SectionType.RULING),
    ("comparisons", SectionType.COMPARISONS),
    ("calculation", SectionType.CALCULATION),
)

# Fields that fall back to inline keyword markers
FALLBACK_FIELDS: Tuple[Tuple[str, SectionType], ...] = (
    ("party_a", SectionType.PARTY_A),
    ("party_b", SectionType.PARTY_B),
    ("ruling", SectionType.RULING),
)

_WHITESPACE_RE = re.compile(r'\s+')
# "1 , 000" / "1 ,000" / "1, 000" split by OCR
_SPLIT_COMMA_RE = re.compile(r'(\d)\s*,\s*(\d)')


class SectionMatch(NamedTuple):
    """A located section before value extraction."""
    title: str
    text: str
    char_index: int
    text_offset: int


class SectionExtractor:
    """Locates decision sections and the numeric values inside them.

    The extractor holds no state between calls; one instance can serve any
    number of documents, concurrently.
    """

    def extract_sections(self, doc_id: str, text: str, search_term: Optional[str] = None) -> DocumentExtraction:
        """Extract all sections and values from a document.

        Args:
            doc_id: Opaque document identifier, passed through unchanged
            text: Raw document text
            search_term: Optional term whose nearby values are also collected

        Returns:
            DocumentExtraction (all fields empty for degenerate input)
        """
        extraction = DocumentExtraction(id=doc_id)

        if not text or len(text) < MIN_DOCUMENT_CHARS:
            return extraction

        text = normalize_text(text)
        seen: Set[Tuple[float, int]] = set()

        # Combined "parties' claims" section, used when neither party has its own
        parties_claims = self.find_section(text, SectionType.PARTIES_CLAIMS)

        for field, section_type in SECTION_FIELDS:
            match = self.find_section(text, section_type)
            if match:
                section = self._build_section(section_type, match)
                setattr(extraction, field, section)
                self._collect_values(extraction, section.values, seen)
                logger.debug(f"{doc_id}: {section_type.value} header '{match.title}' at {match.char_index}")

        if extraction.party_a is None and extraction.party_b is None and parties_claims:
            section = self._build_section(SectionType.PARTIES_CLAIMS, parties_claims)
            extraction.party_a = section
            self._collect_values(extraction, section.values, seen)
            logger.debug(f"{doc_id}: using combined parties' claims '{parties_claims.title}' as party A")

        for field, section_type in FALLBACK_FIELDS:
            if getattr(extraction, field) is not None:
                continue
            match = self.find_keyword_fallback(text, KEYWORD_FALLBACKS[section_type])
            if match:
                section = self._build_section(section_type, match)
                setattr(extraction, field, section)
                self._collect_values(extraction, section.values, seen)
                logger.debug(f"{doc_id}: {section_type.value} keyword fallback '{match.title}' at {match.char_index}")

        if search_term and search_term.strip():
            for value in self.values_near_term(text, search_term):
                if any(existing.numeric == value.numeric for existing in extraction.all_values):
                    continue
                self._collect_values(extraction, [value], seen)

        return extraction

    def find_section(self, text: str, section_type: SectionType) -> Optional[SectionMatch]:
        """Find a section by its header phrases.

        Phrases are tried in priority order and the first one that matches
        anywhere wins. The section runs until the nearest following header
        of any type, or the end of the document.

        Args:
            text: Normalized document text
            section_type: Section type to look for

        Returns:
            SectionMatch, or None if no header matched or the body is too short
        """
        best: Optional[Tuple[str, int]] = None
        for phrase, regex in HEADER_REGEXES.get(section_type, []):
            match = regex.search(text)
            if match:
                best = (phrase, match.start("title"))
                break

        if best is None:
            return None

        title, index = best
        section_start = index + len(title)
        section_end = self.find_next_section_start(text, section_start)

        body = text[section_start:section_end]
        stripped = body.strip()
        if len(stripped) < MIN_SECTION_CHARS:
            return None

        return SectionMatch(
            title=title,
            text=stripped[:MAX_SECTION_CHARS],
            char_index=index,
            text_offset=section_start + len(body) - len(body.lstrip()),
        )

    def find_next_section_start(self, text: str, from_index: int) -> int:
        """Find where the next known header (of any section type) starts.

        Args:
            text: Normalized document text
            from_index: Position the current header ends at

        Returns:
            Start index of the nearest following header, or len(text)
        """
        nearest_end = len(text)
        for regex in ALL_HEADER_REGEXES:
            match = regex.search(text, from_index + 1)
            if match and match.start() < nearest_end:
                nearest_end = match.start()
        return nearest_end

    def find_keyword_fallback(self, text: str, keywords: List[str]) -> Optional[SectionMatch]:
        """Locate a section by an inline marker phrase.

        Only the first FALLBACK_SEARCH_CHARS characters are searched. The
        section is a fixed window around the first marker found.

        Args:
            text: Normalized document text
            keywords: Marker phrases in priority order

        Returns:
            SectionMatch titled with the marker, or None
        """
        search_text = text[:FALLBACK_SEARCH_CHARS]

        for keyword in keywords:
            index = search_text.find(keyword)
            if index == -1:
                continue

            start = max(0, index - FALLBACK_CHARS_BEFORE)
            end = min(len(text), index + FALLBACK_CHARS_AFTER)
            window = text[start:end]
            stripped = window.strip()
            if len(stripped) < MIN_FALLBACK_CHARS:
                continue

            return SectionMatch(
                title=keyword,
                text=stripped[:MAX_SECTION_CHARS],
                char_index=index,
                text_offset=start + len(window) - len(window.lstrip()),
            )

        return None

    def extract_values(self, section_text: str, base_char_index: int) -> List[ExtractedValue]:
        """Extract monetary, percentage and coefficient values from text.

        Args:
            section_text: Text to scan
            base_char_index: Offset of section_text[0] in the normalized document

        Returns:
            Values in pattern order, deduplicated by (value, position)
        """
        values: List[ExtractedValue] = []
        seen: Set[Tuple[float, int]] = set()

        for pattern in VALUE_PATTERNS:
            for match in pattern.finditer(section_text):
                raw = match.group(1)
                if not raw:
                    continue

                following = section_text[match.end(1):match.end(1) + 5]
                if is_date_like(raw, following):
                    continue

                numeric = parse_number(raw)
                if numeric is None or numeric <= 0:
                    continue

                key = (numeric, match.start(1))
                if key in seen:
                    continue
                seen.add(key)

                ctx_start = max(0, match.start() - VALUE_CONTEXT_CHARS)
                ctx_end = min(len(section_text), match.end() + VALUE_CONTEXT_CHARS)
                context = _WHITESPACE_RE.sub(' ', section_text[ctx_start:ctx_end]).strip()

                values.append(ExtractedValue(
                    raw=raw,
                    numeric=numeric,
                    unit=detect_unit(context),
                    context=context,
                    char_index=base_char_index + match.start(1),
                ))

        return values

    def values_near_term(self, text: str, search_term: str) -> List[ExtractedValue]:
        """Collect the first qualifying value after each occurrence of a term.

        Matching is case-insensitive. Comma groups split by OCR spacing are
        re-joined before scanning; a value read across a re-joined group cannot
        be relocated in the document and gets char_index -1.

        Args:
            text: Normalized document text
            search_term: Free-text term

        Returns:
            One value per qualifying occurrence, in document order
        """
        term = normalize_text(search_term).strip()
        if not term:
            return []

        value_range = value_range_for_term(term)
        occurrence_re = re.compile('(?=' + re.escape(term) + ')', re.IGNORECASE)
        values: List[ExtractedValue] = []

        for count, occurrence in enumerate(occurrence_re.finditer(text)):
            if count >= MAX_NEAR_TERM_OCCURRENCES:
                break

            found = occurrence.start()
            window_start = found + len(term)
            window = text[window_start:window_start + NEAR_TERM_WINDOW_CHARS]
            joined = _SPLIT_COMMA_RE.sub(r'\1,\2', window)

            candidate = first_qualifying_number(joined, value_range)
            if candidate is None:
                continue
            raw, numeric, offset = candidate

            # Offsets in joined match the window only up to the first re-joined group
            end = offset + len(raw)
            if joined[:end] == window[:end]:
                char_index = window_start + offset
            else:
                char_index = -1

            snippet_window = text[found:window_start + TERM_WINDOW_CHARS]
            snippet = _WHITESPACE_RE.sub(' ', snippet_window).strip()[:MAX_CONTEXT_CHARS]

            values.append(ExtractedValue(
                raw=raw,
                numeric=numeric,
                unit=detect_unit(snippet),
                context=snippet,
                char_index=char_index,
            ))

        return values

    def _build_section(self, section_type: SectionType, match: SectionMatch) -> ExtractedSection:
        return ExtractedSection(
            type=section_type,
            title=match.title,
            text=match.text,
            char_index=match.char_index,
            text_offset=match.text_offset,
            values=self.extract_values(match.text, match.text_offset),
        )

    def _collect_values(
        self,
        extraction: DocumentExtraction,
        values: List[ExtractedValue],
        seen: Set[Tuple[float, int]],
    ) -> None:
        """Append values to all_values, skipping (value, position) duplicates."""
        for value in values:
            key = (value.numeric, value.char_index)
            if key in seen:
                continue
            seen.add(key)
            extraction.all_values.append(value)


_default_extractor = SectionExtractor()


def extract_sections(doc_id: str, text: str, search_term: Optional[str] = None) -> DocumentExtraction:
    """Extract sections and values from one document (see SectionExtractor)."""
    return _default_extractor.extract_sections(doc_id, text, search_term)
