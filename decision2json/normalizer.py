"""Text normalization applied once per document before any pattern matching."""

import re

# Zero-width characters, BOM and bidirectional controls (marks, embeddings, isolates)
_INVISIBLE_RE = re.compile('[\u200B-\u200F\uFEFF\u061C\u202A-\u202E\u2066-\u2069]')

# Non-newline whitespace runs
_SPACE_RUN_RE = re.compile(r'[^\S\n]+')


def normalize_text(text: str) -> str:
    """Normalize decision text for pattern matching.

    Strips invisible/directional characters, maps gershayim and geresh to
    ASCII quotes, maps en/em dashes to hyphen-minus, unifies line endings
    and collapses whitespace runs. Newlines are kept since section
    boundaries are anchored on them. The function is idempotent.

    Args:
        text: Raw document text

    Returns:
        Normalized text
    """
    if not text:
        return ""

    text = _INVISIBLE_RE.sub('', text)
    # gershayim -> ", geresh -> '
    text = text.replace('\u05F4', '"').replace('\u05F3', "'")
    text = text.replace('\u2013', '-').replace('\u2014', '-')
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    return _SPACE_RUN_RE.sub(' ', text)
