"""Header phrases, fallback markers and value patterns for appraisal decisions.

Phrase lists are ordered most-specific first: when several phrases of the same
section type match, the one listed first wins regardless of its position in
the text. The lists are data and are expected to grow as new document
variants are found.
"""

import re
from typing import Dict, List, Optional, Tuple

from decision2json.models import SectionType

# Hebrew block (letters, points, maqaf, geresh/gershayim)
HEBREW_CHARS = '\u0590-\u05FF'

# Unit labels
UNIT_PER_SQM = '₪/מ"ר'
UNIT_PER_DUNAM = '₪/דונם'
UNIT_PER_UNIT = "₪/יח'"
UNIT_CURRENCY = '₪'
UNIT_PERCENT = '%'
UNIT_COEFFICIENT = 'מקדם'


SECTION_PATTERNS: Dict[SectionType, List[str]] = {
    SectionType.PARTY_A: [
        # Appraiser's claims
        'עיקר טענות שמאית המבקשת',
        'עיקר טענות שמאי המבקשים',
        'עיקר טענות שמאי המבקש',
        'טענות שמאי המבקשים',
        'טענות שמאי המבקש',
        'טענות שמאית המבקשת',
        'טענות שמאי המבקשת',
        'טענות שמאי המערער',
        'טענות שמאי המערערים',
        'טענות שמאית המערערת',
        'טענות שמאי המערערת',
        'טענות שמאי העורר',
        'טענות שמאי העוררים',
        'טענות שמאית העוררת',
        'טענות שמאי העוררת',
        # Assessment ("שומת")
        'שומת בעלי הזכויות בנכס',
        'שומת בעלי הזכויות',
        'שומת שמאי המבקשים',
        'שומת שמאי המבקש',
        'שומת שמאית המבקשת',
        'שומת המבקשים',
        'שומת המבקש',
        'שומת המבקשת',
        'שומת המערערים',
        'שומת המערער',
        'שומת בעל הנכס',
        'שומת הבעלים',
        # Party claims
        'טענות המבקשים',
        'טענות המבקש',
        'טענות המבקשת',
        'טענות המערערים',
        'טענות המערער',
        'טענות המערערת',
        'טענות העוררים',
        'טענות העורר',
        'טענות העוררת',
        'טענות בעל הנכס',
        'טענות הבעלים',
        # Position ("עמדת")
        'עמדת שמאי המבקשים',
        'עמדת שמאי המבקש',
        'עמדת שמאית המבקשת',
        'עמדת שמאי המבקשת',
        'עמדת המבקשים',
        'עמדת המבקש',
        'עמדת המבקשת',
        'עמדת המערערים',
        'עמדת המערער',
        'עמדת העוררים',
        'עמדת העורר',
        'עמדת בעל הנכס',
        'עמדת שמאי הבעלים',
        'עמדת שמאית הבעלים',
    ],
    SectionType.PARTY_B: [
        'עיקר טענות שמאי המשיבה',
        'עיקר טענות שמאי הוועדה',
        'עיקר טענות שמאי הועדה',
        'טענות שמאי המשיבה',
        'טענות שמאי המשיבים',
        'טענות שמאי הוועדה',
        'טענות שמאי הועדה',
        'טענות שמאי הרשות',
        'שומת הועדה המקומית',
        'שומת הוועדה המקומית',
        'שומת שמאי המשיבה',
        'שומת שמאי הוועדה',
        'שומת שמאי הועדה',
        'שומת המשיבה',
        'שומת המשיבים',
        'שומת הועדה',
        'שומת הוועדה',
        'שומת הרשות',
        'טענות המשיבה',
        'טענות המשיבים',
        'טענות הרשות',
        'טענות הועדה המקומית',
        'טענות הוועדה המקומית',
        'עמדת שמאי המשיבה',
        'עמדת שמאי הוועדה',
        'עמדת שמאי הועדה',
        'עמדת המשיבה',
        'עמדת המשיבים',
        'עמדת הועדה',
        'עמדת הוועדה',
        'עמדת הועדה המקומית',
        'עמדת הוועדה המקומית',
        'עמדת הרשות',
    ],
    SectionType.PARTIES_CLAIMS: [
        'עיקרי טיעוני הצדדים',
        'תמצית שומות הצדדים',
        'סיכום ממצאי שומות הצדדים',
        'ממצאי שומות הצדדים',
        'שומות הצדדים',
        'טענות הצדדים',
        'עמדות הצדדים',
        'טענות הצדדים בתמצית',
        'תמצית טענות הצדדים',
    ],
    SectionType.RULING: [
        'הכרעת השמאי המכריע',
        'קביעת השמאי המכריע',
        'החלטת השמאי המכריע',
        'מסקנות השמאי המכריע',
        'הכרעת השמאית המכריעה',
        'הכרעת השמאי',
        'קביעת השמאי',
        'החלטת השמאי',
        'הכרעת השמאית',
        # Compound headers
        'עיקרי טיעוני הצדדים והכרעה',
        'התייחסות ומסקנות',
        'מסקנות והכרעה',
        'סיכום והכרעה',
        'דיון והכרעה',
        'ממצאים והכרעה',
        'ניתוח והכרעה',
        # Short forms
        'הכרעה',
        'קביעה',
        'החלטה',
        'סיכום',
        'מסקנות',
    ],
    SectionType.COMPARISONS: [
        'עסקאות השוואה',
        'עסקאות ההשוואה',
        'נתוני השוואה',
        'נתוני ההשוואה',
        'נתוני שוק',
        'עסקאות להשוואה',
    ],
    SectionType.CALCULATION: [
        'תחשיב השבחה',
        'תחשיב ההשבחה',
        'חישוב ההשבחה',
        'חישוב השבחה',
        'חישוב היטל ההשבחה',
        'חישוב היטל השבחה',
    ],
}


# Inline markers used when no formal header exists
KEYWORD_FALLBACKS: Dict[SectionType, List[str]] = {
    SectionType.PARTY_A: [
        'שומת בעלי הזכויות בנכס',
        'שומת בעלי הזכויות',
        'שומה מטעם המבקש',
        'שומה מטעם המבקשים',
        'לטענת שמאי המבקש',
        'לטענת שמאי המבקשים',
        'לטענת שמאית המבקשת',
        'לטענת המבקש',
        'לטענת המבקשים',
        'לטענת המבקשת',
        'לטענת המערער',
        'לטענת המערערים',
        'לטענת העורר',
        'לטענת העוררים',
        'בחוות דעת שמאי המבקש',
        'בחוות דעת שמאי המבקשים',
        'בחוות דעת שמאית המבקשת',
        'עמדת שמאי הבעלים',
        'עמדת שמאית הבעלים',
        'עמדת שמאית המבקש',
        'עמדת שמאי המבקש',
    ],
    SectionType.PARTY_B: [
        'שומת הועדה המקומית',
        'שומת הוועדה המקומית',
        'שומה מטעם המשיבה',
        'שומה מטעם הוועדה',
        'לטענת שמאי המשיבה',
        'לטענת שמאי הוועדה',
        'לטענת שמאי הועדה',
        'לטענת המשיבה',
        'לטענת המשיבים',
        'לטענת הועדה',
        'לטענת הוועדה',
        'לטענת הרשות',
        'בחוות דעת שמאי המשיבה',
        'בחוות דעת שמאי הוועדה',
        'עמדת שמאי המשיבה',
        'עמדת שמאי הוועדה',
        'עמדת שמאי הועדה',
    ],
    SectionType.RULING: [
        'לאחר ששקלתי',
        'לאחר שבחנתי',
        'לאחר עיון',
        'לאור כל האמור',
        'מכל האמור לעיל',
        'התייחסות ומסקנות',
        'סוף דבר',
        'אשר על כן',
        'לסיכום',
    ],
}


# Numbering prefix: "3." | "3.1" | "3.1.2" | "11 ." | "א." | "א'" | "(2)" | "(א)"
_NUMBERING_PREFIX = r'(?:\d+(?:\s?\.\d+)*\s?\.?|[א-ת][\'"]?\s?\.?|\(\d+\)|\([א-ת]\))'
# Up to three extra words before the phrase ("עיקרי", "תמצית", ...)
_EXTRA_WORDS = r'(?:[' + HEBREW_CHARS + r'"]+\s+){0,3}'


def build_header_regex(phrase: str) -> re.Pattern:
    """Compile the anchored header pattern for a single phrase.

    The phrase must start a line (or follow a double space), optionally
    preceded by a numbering token, a bullet/dash and up to three words, and
    may be followed by a colon or period. The phrase itself is captured in
    the ``title`` group.
    """
    return re.compile(
        r'(?:^|\n|  )\s*(?:' + _NUMBERING_PREFIX + r'\s+)?(?:[\-•]\s*)?'
        + _EXTRA_WORDS
        + r'(?P<title>' + re.escape(phrase) + r')\s*[:.]?',
        re.MULTILINE,
    )


HEADER_REGEXES: Dict[SectionType, List[Tuple[str, re.Pattern]]] = {
    section_type: [(phrase, build_header_regex(phrase)) for phrase in phrases]
    for section_type, phrases in SECTION_PATTERNS.items()
}

# Every known header across all types, for section boundary detection
ALL_HEADER_REGEXES: List[re.Pattern] = [
    regex for entries in HEADER_REGEXES.values() for _, regex in entries
]


_NUM = r'([\d,]+(?:\.\d+)?)'
_CURRENCY = r'(?:₪|ש"ח|שח)'

VALUE_PATTERNS: List[re.Pattern] = [
    # "100,000 ₪/דונם", "100,000 ש"ח למ"ר"
    re.compile(_NUM + r'\s*' + _CURRENCY + r'\s*[/\\]?\s*(?:דונם|מ"ר|מטר|למ"ר|למטר|לדונם|יח\'|יח"ד)'),
    # "₪ 100,000"
    re.compile(_CURRENCY + r'\s*' + _NUM),
    # "100,000 ₪"
    re.compile(_NUM + r'\s*(?:₪|ש"ח)'),
    # "מקדם דחייה: 0,85"
    re.compile(r'מקדם\s+[' + HEBREW_CHARS + r']+(?:\s+[' + HEBREW_CHARS + r']+)*\s*[:=\-]?\s*(\d+[.,]\d+)'),
    # "15%"
    re.compile(r'([\d.,]+)\s*%'),
    # "5,000 למ"ר"
    re.compile(_NUM + r'\s*(?:למ"ר|למטר|לדונם)'),
]


_DUNAM_RE = re.compile(r'₪\s*[/\\]?\s*דונם|לדונם')
_SQM_RE = re.compile(r'₪\s*[/\\]?\s*(?:מ"ר|מטר)|למ"ר|למטר')
_PER_UNIT_RE = re.compile(r'₪\s*[/\\]?\s*(?:יח\'|יח"ד)')
_CURRENCY_RE = re.compile(_CURRENCY)


def detect_unit(context: str) -> Optional[str]:
    """Infer the unit of a value from the text around it.

    Checked in priority order: per dunam, per sqm, per unit, percent,
    coefficient, plain currency.
    """
    if not context:
        return None
    if _DUNAM_RE.search(context):
        return UNIT_PER_DUNAM
    if _SQM_RE.search(context):
        return UNIT_PER_SQM
    if _PER_UNIT_RE.search(context):
        return UNIT_PER_UNIT
    if '%' in context:
        return UNIT_PERCENT
    if 'מקדם' in context:
        return UNIT_COEFFICIENT
    if _CURRENCY_RE.search(context):
        return UNIT_CURRENCY
    return None


def is_currency_unit(unit: Optional[str]) -> bool:
    return bool(unit) and '₪' in unit
