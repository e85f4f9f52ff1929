"""Comparison of a search term's values across many decisions."""

from concurrent.futures import ProcessPoolExecutor
from itertools import repeat
from typing import Iterable, List, Optional, Tuple

from loguru import logger

from decision2json.extractor import extract_sections
from decision2json.formatting import format_optional_value
from decision2json.models import (
    CompareResult, CompareRow, DocumentExtraction, DocumentInput, ExtractedValue
)
from decision2json.resolver import resolve_value_for_term, resolve_value_from_full_document

# Hard cap on rows in one comparison
MAX_COMPARE = 50
# Characters of each document considered
TEXT_CAP = 50000


def resolve_party_values(
    extraction: DocumentExtraction,
    text: str,
    search_term: Optional[str],
) -> Tuple[Optional[ExtractedValue], Optional[ExtractedValue], Optional[ExtractedValue]]:
    """Resolve party A, party B and ruling values for a term.

    When none of the three sections yields a value, the full document is
    searched and the result is reported in the ruling slot, since it cannot
    be attributed to either party.

    Returns:
        Tuple of (party_a_value, party_b_value, ruling_value)
    """
    party_a = resolve_value_for_term(extraction.party_a, search_term)
    party_b = resolve_value_for_term(extraction.party_b, search_term)
    ruling = resolve_value_for_term(extraction.ruling, search_term)

    if party_a is None and party_b is None and ruling is None and search_term and search_term.strip():
        ruling = resolve_value_from_full_document(text, search_term)

    return party_a, party_b, ruling


def build_row(document: DocumentInput, search_term: str, text_cap: int = TEXT_CAP) -> Optional[CompareRow]:
    """Build the comparison row for one document.

    Returns:
        CompareRow, or None when the document has no text or no value at all
    """
    text = (document.text or "")[:text_cap]
    if not text:
        return None

    extraction = extract_sections(document.id, text, search_term)
    party_a, party_b, ruling = resolve_party_values(extraction, text, search_term)

    if party_a is None and party_b is None and ruling is None:
        return None

    return CompareRow(
        id=document.id,
        title=document.title,
        committee=document.committee,
        year=document.year,
        url=document.url,
        party_a_value=format_optional_value(party_a),
        party_b_value=format_optional_value(party_b),
        ruling_value=format_optional_value(ruling),
        ruling_numeric=ruling.numeric if ruling else None,
    )


def compare_documents(
    documents: Iterable[DocumentInput],
    search_term: str,
    limit: int = MAX_COMPARE,
    text_cap: int = TEXT_CAP,
    workers: int = 1,
    committee: Optional[str] = None,
) -> CompareResult:
    """Compare a term's values across documents.

    Documents are deduplicated by id and by title (first one wins), optionally
    filtered by committee, and those yielding no value are dropped. Each
    document is processed independently, in worker processes when
    workers > 1; row order follows input order.

    Args:
        documents: Candidate documents, best first
        search_term: Term whose values are compared
        limit: Maximum number of rows (capped at MAX_COMPARE)
        text_cap: Characters of each document to consider
        workers: Number of worker processes
        committee: Optional committee name filter

    Returns:
        CompareResult
    """
    limit = max(1, min(limit, MAX_COMPARE))
    candidates = _select_candidates(documents, committee)
    logger.info(f"Comparing '{search_term}' across {len(candidates)} documents")

    if workers > 1 and len(candidates) > 1:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            built = list(executor.map(build_row, candidates, repeat(search_term), repeat(text_cap)))
        rows = [row for row in built if row is not None][:limit]
    else:
        rows = []
        for document in candidates:
            row = build_row(document, search_term, text_cap)
            if row is None:
                logger.debug(f"{document.id}: no value for '{search_term}'")
                continue
            rows.append(row)
            if len(rows) >= limit:
                break

    return CompareResult(term=search_term, committee=committee, total=len(rows), rows=rows)


def _select_candidates(documents: Iterable[DocumentInput], committee: Optional[str]) -> List[DocumentInput]:
    """Deduplicate documents by id and non-empty title, and filter by committee."""
    seen_ids = set()
    seen_titles = set()
    selected: List[DocumentInput] = []
    committee_words = committee.split() if committee else []

    for document in documents:
        if document.id in seen_ids:
            continue
        seen_ids.add(document.id)

        # Same decision indexed twice under different ids
        if document.title:
            if document.title in seen_titles:
                continue
            seen_titles.add(document.title)

        # "תל אביב" matches "תל אביב-יפו"
        if committee_words and not all(word in (document.committee or "") for word in committee_words):
            continue

        selected.append(document)

    return selected
