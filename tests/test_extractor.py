import pytest

from decision2json.extractor import SectionExtractor, extract_sections
from decision2json.models import SectionType
from decision2json.normalizer import normalize_text
from decision2json.numerals import parse_number
from decision2json.patterns import UNIT_COEFFICIENT, UNIT_CURRENCY, UNIT_PER_SQM, UNIT_PERCENT


@pytest.fixture
def extractor():
    return SectionExtractor()


def test_short_document_yields_empty_extraction():
    extraction = extract_sections("short", "הכרעה: 100 ₪")
    assert extraction.id == "short"
    assert all(section is None for section in extraction.sections().values())
    assert extraction.all_values == []


def test_empty_document():
    extraction = extract_sections("empty", "")
    assert extraction.all_values == []
    assert extraction.ruling is None


def test_all_sections_located(sample_text):
    extraction = extract_sections("doc-1", sample_text)
    assert extraction.party_a.title == "טענות שמאי המבקשים"
    assert extraction.party_b.title == "טענות שמאי המשיבה"
    assert extraction.comparisons.title == "עסקאות השוואה"
    assert extraction.calculation.title == "תחשיב השבחה"
    assert extraction.ruling.title == "הכרעה"
    assert extraction.party_a.type == SectionType.PARTY_A
    assert extraction.ruling.type == SectionType.RULING


def test_char_index_points_at_header_phrase(sample_text, normalized_sample):
    extraction = extract_sections("doc-1", sample_text)
    for section in extraction.sections().values():
        assert normalized_sample[section.char_index:section.char_index + len(section.title)] == section.title


def test_text_offset_points_at_section_text(sample_text, normalized_sample):
    extraction = extract_sections("doc-1", sample_text)
    for section in extraction.sections().values():
        assert normalized_sample[section.text_offset:section.text_offset + len(section.text)] == section.text


def test_section_ends_at_next_header(sample_text):
    extraction = extract_sections("doc-1", sample_text)
    assert extraction.party_a.text == "לטענת המבקשים שווי הקרקע הוא 12,000 ₪ למ\"ר ומקדם דחייה: 0.85 לפי הנוהג."
    assert "9,500" not in extraction.party_a.text
    assert "טענות שמאי המשיבה" not in extraction.party_a.text
    assert extraction.ruling.text.endswith("לכל הזכויות.")


def test_section_values(sample_text):
    extraction = extract_sections("doc-1", sample_text)
    party_a = {value.numeric: value for value in extraction.party_a.values}
    assert set(party_a) == {12000.0, 0.85}
    assert party_a[12000.0].raw == "12,000"
    assert party_a[12000.0].unit == UNIT_PER_SQM

    comparisons = extraction.comparisons.values
    assert [value.numeric for value in comparisons] == [1250000.0]
    assert comparisons[0].unit == UNIT_CURRENCY


def test_all_values_round_trip(sample_text, normalized_sample):
    extraction = extract_sections("doc-1", sample_text)
    assert len(extraction.all_values) == 8
    for value in extraction.all_values:
        assert value.numeric > 0
        assert parse_number(value.raw) == value.numeric
        assert normalized_sample[value.char_index:value.char_index + len(value.raw)] == value.raw


def test_all_values_unique(sample_text):
    extraction = extract_sections("doc-1", sample_text, "מקדם דחייה")
    keys = [(value.numeric, value.char_index) for value in extraction.all_values]
    assert len(keys) == len(set(keys))


def test_dates_are_not_values(sample_text):
    extraction = extract_sections("doc-1", sample_text)
    assert 2019.0 not in {value.numeric for value in extraction.all_values}
    assert 15.03 not in {value.numeric for value in extraction.all_values}


def test_keyword_fallback_for_ruling(fallback_text):
    normalized = normalize_text(fallback_text)
    extraction = extract_sections("doc-2", fallback_text)
    assert extraction.ruling is not None
    assert extraction.ruling.title == "לאחר ששקלתי"
    assert extraction.ruling.char_index == normalized.index("לאחר ששקלתי")
    assert [value.numeric for value in extraction.ruling.values] == [8000.0]


def test_combined_claims_used_as_party_a(combined_claims_text):
    extraction = extract_sections("doc-3", combined_claims_text)
    assert extraction.party_a is not None
    assert extraction.party_a.type == SectionType.PARTIES_CLAIMS
    assert extraction.party_a.title == "טענות הצדדים"
    assert extraction.party_b is None
    assert {value.numeric for value in extraction.party_a.values} == {7000.0, 5000.0}


def test_header_without_body_is_skipped(extractor):
    text = "מבוא כללי לעניין הנכס ולעסקה שבוצעה בו בשנים האחרונות ועוד פרטים רבים\n5. הכרעה\nקצר\n"
    assert extractor.find_section(normalize_text(text), SectionType.RULING) is None


def test_section_capped(extractor):
    body = "השווי נקבע לפי נתוני שוק " * 500
    text = "מבוא\n5. הכרעה\n" + body
    match = extractor.find_section(text, SectionType.RULING)
    assert len(match.text) == 8000


def test_priority_order_wins_over_position(extractor):
    # "מסקנות" appears first in the text but "הכרעה" is listed first
    text = "מבוא\nמסקנות\nטקסט ארוך מספיק כדי להיחשב כפרק בהחלטה\nהכרעה\nהשווי נקבע לפי נתוני השוק באזור\n"
    match = extractor.find_section(text, SectionType.RULING)
    assert match.title == "הכרעה"


def test_find_next_section_start_without_header(extractor):
    text = "אין כאן כותרות נוספות"
    assert extractor.find_next_section_start(text, 0) == len(text)


def test_extract_values_coefficient(extractor):
    text = "מקדם דחייה: 0.85"
    values = extractor.extract_values(text, 10)
    assert len(values) == 1
    assert values[0].raw == "0.85"
    assert values[0].numeric == pytest.approx(0.85)
    assert values[0].unit == UNIT_COEFFICIENT
    assert values[0].char_index == 10 + text.index("0.85")


def test_extract_values_decimal_comma_coefficient(extractor):
    values = extractor.extract_values("מקדם דחייה: 0,85", 0)
    assert values[0].raw == "0,85"
    assert values[0].numeric == pytest.approx(0.85)


def test_extract_values_percent_and_currency(extractor):
    values = extractor.extract_values("שיעור ההיטל 50% מתוך סכום של ₪ 200,000 לכל הנכס", 0)
    by_numeric = {value.numeric: value for value in values}
    assert by_numeric[50.0].unit == UNIT_PERCENT
    assert 200000.0 in by_numeric


def test_extract_values_dedup_same_position(extractor):
    # Matched by both the per-sqm and plain currency patterns
    values = extractor.extract_values("שווי 12,000 ₪ למ\"ר", 0)
    assert len(values) == 1


def test_extract_values_context(extractor):
    text = "א" * 100 + " 12,000 ₪ " + "ב" * 100
    value = extractor.extract_values(text, 0)[0]
    assert len(value.context) <= len("12,000 ₪") + 2 * 40
    assert "12,000" in value.context


def test_search_term_collects_nearby_values(headerless_text):
    normalized = normalize_text(headerless_text)
    extraction = extract_sections("doc-4", headerless_text, "מקדם דחייה")
    assert all(section is None for section in extraction.sections().values())
    assert len(extraction.all_values) == 1
    value = extraction.all_values[0]
    assert value.numeric == pytest.approx(0.75)
    assert normalized[value.char_index:value.char_index + 4] == "0.75"


def test_near_term_rejoins_split_thousands(extractor):
    text = "הנכס כולל שש יחידות דיור. דמי היתר בסך 1 , 200 לכל יחידה שולמו במלואם."
    values = extractor.values_near_term(text, "דמי היתר")
    assert len(values) == 1
    assert values[0].raw == "1,200"
    assert values[0].numeric == 1200.0
    assert values[0].char_index == -1


def test_near_term_without_term_occurrence(extractor):
    assert extractor.values_near_term("אין כאן דבר", "מקדם") == []


def test_near_term_offset_skips_earlier_matching_digits(extractor):
    # The "5" of "15%" must not be taken as the value's position
    text = "הנכס כולל יחידות רבות. שווי 15% ו 5 לכל יחידה בבניין."
    values = extractor.values_near_term(text, "שווי")
    assert len(values) == 1
    assert values[0].raw == "5"
    assert values[0].char_index == text.index("ו 5") + 2


def test_near_term_offset_kept_when_split_group_follows(extractor):
    text = "הנכס כולל יחידות רבות. שווי 7 לכל יחידה ועוד 1 , 200 למחסן."
    values = extractor.values_near_term(text, "שווי")
    assert values[0].raw == "7"
    assert values[0].char_index == text.index("7")


def test_near_term_normalizes_search_term(extractor):
    text = normalize_text("בדירה נקבע שווי למ\"ר 5,000 ₪ לפי התחשיב.")
    values = extractor.values_near_term(text, "שווי למ" + chr(0x05F4) + "ר")
    assert len(values) == 1
    assert values[0].numeric == 5000.0


@pytest.mark.parametrize("text", [
    chr(0x200F) * 500,
    "abc " * 100,
    "".join(chr(code) for code in range(1, 32)) * 10,
    "1,2,3,,4.5.6 %% ₪₪ " * 20,
])
def test_degenerate_input_never_raises(text):
    extraction = extract_sections("odd", text, "abc")
    assert extraction.id == "odd"
    for value in extraction.all_values:
        assert value.numeric > 0


def test_fallback_marker_beyond_search_limit_ignored(extractor):
    text = "א " * 25001 + "לאחר ששקלתי את הנתונים אני קובע שווי של 8,000 ₪ לכל הדירה"
    assert extractor.find_keyword_fallback(text, ["לאחר ששקלתי"]) is None


def test_fallback_marker_inside_search_limit(extractor):
    text = "א" * 49000 + " לאחר ששקלתי את הנתונים אני קובע שווי של 8,000 ₪ לכל הדירה"
    match = extractor.find_keyword_fallback(text, ["לאחר ששקלתי"])
    assert match.char_index == 49001


def test_fallback_window_edges(extractor):
    text = "ב" * 1000 + "לאחר ששקלתי" + "ג" * 3000
    match = extractor.find_keyword_fallback(text, ["לאחר ששקלתי"])
    assert match.char_index == 1000
    assert match.text_offset == 500
    assert match.text == text[500:3500]
    assert len(match.text) == 3000


def test_fallback_window_too_short(extractor):
    assert extractor.find_keyword_fallback("לסיכום קצר", ["לסיכום"]) is None
