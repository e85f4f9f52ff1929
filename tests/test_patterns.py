from decision2json.models import SectionType
from decision2json.patterns import (
    HEADER_REGEXES,
    KEYWORD_FALLBACKS,
    SECTION_PATTERNS,
    UNIT_COEFFICIENT,
    UNIT_CURRENCY,
    UNIT_PER_DUNAM,
    UNIT_PER_SQM,
    UNIT_PER_UNIT,
    UNIT_PERCENT,
    build_header_regex,
    detect_unit,
    is_currency_unit,
)


def test_every_section_type_has_header_phrases():
    for section_type in SectionType:
        assert SECTION_PATTERNS[section_type]
        assert len(HEADER_REGEXES[section_type]) == len(SECTION_PATTERNS[section_type])


def test_fallbacks_only_for_parties_and_ruling():
    assert set(KEYWORD_FALLBACKS) == {SectionType.PARTY_A, SectionType.PARTY_B, SectionType.RULING}


def test_header_with_numbering_and_colon():
    match = build_header_regex("הכרעה").search("מבוא\n4. הכרעה:\nנקבע כי")
    assert match is not None
    assert match.group("title") == "הכרעה"


def test_header_with_hebrew_numbering():
    match = build_header_regex("טענות המשיבה").search("מבוא\nב. טענות המשיבה\nהמשיבה טוענת")
    assert match is not None


def test_header_with_extra_leading_words():
    match = build_header_regex("טענות הצדדים").search("מבוא\nעיקר טענות הצדדים\n")
    assert match is not None
    assert match.group("title") == "טענות הצדדים"


def test_header_after_double_space():
    assert build_header_regex("הכרעה").search("סוף הפרק.  הכרעה: נקבע") is not None


def test_phrase_deep_in_prose_is_not_a_header():
    text = "בסופו של דבר נדרשת הכרעה בין הצדדים"
    assert build_header_regex("הכרעה").search(text) is None


def test_detect_unit_priority():
    assert detect_unit("100,000 ₪/דונם") == UNIT_PER_DUNAM
    assert detect_unit("800 ₪ לדונם ולא למ\"ר") == UNIT_PER_DUNAM
    assert detect_unit("12,000 ₪ למ\"ר") == UNIT_PER_SQM
    assert detect_unit("12,000 ₪/מטר") == UNIT_PER_SQM
    assert detect_unit("250,000 ₪/יח'") == UNIT_PER_UNIT
    assert detect_unit("250,000 ₪/יח\"ד") == UNIT_PER_UNIT
    assert detect_unit("שיעור של 15%") == UNIT_PERCENT
    assert detect_unit("מקדם דחייה 0.85") == UNIT_COEFFICIENT
    assert detect_unit("סך של 500 ש\"ח") == UNIT_CURRENCY
    assert detect_unit("ללא יחידה 12") is None
    assert detect_unit("") is None


def test_is_currency_unit():
    assert is_currency_unit(UNIT_PER_SQM)
    assert is_currency_unit(UNIT_CURRENCY)
    assert not is_currency_unit(UNIT_PERCENT)
    assert not is_currency_unit(None)
