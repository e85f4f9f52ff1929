import pytest

from decision2json.numerals import in_range, is_date_like, parse_number, value_range_for_term


@pytest.mark.parametrize("raw, expected", [
    ("1,250,000", 1250000.0),
    ("12,000", 12000.0),
    ("0,85", 0.85),
    ("12,5", 12.5),
    ("3.5", 3.5),
    ("100", 100.0),
    # Neither a thousands group nor a decimal comma: commas are dropped
    ("1,2345", 12345.0),
])
def test_parse_number(raw, expected):
    assert parse_number(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["", "abc", "1.2.3", ",", "."])
def test_parse_number_invalid(raw):
    assert parse_number(raw) is None


def test_parse_number_strips_whitespace():
    assert parse_number(" 0.85 ") == pytest.approx(0.85)


def test_is_date_like():
    assert is_date_like("15.03.2019")
    assert is_date_like("15.03", ".2019 נחתם")
    assert not is_date_like("0.85")
    assert not is_date_like("12,000", " ₪")


def test_value_range_for_term():
    assert value_range_for_term("מקדם דחייה") == (0.01, 2.5)
    assert value_range_for_term("אחוז בנייה") == (0.0, 100.0)
    assert value_range_for_term("שיעור היטל") == (0.0, 100.0)
    assert value_range_for_term("שווי למ\"ר") is None
    assert value_range_for_term(None) is None


def test_in_range_inclusive():
    assert in_range(2.5, (0.01, 2.5))
    assert in_range(0.01, (0.01, 2.5))
    assert not in_range(150, (0.01, 2.5))
    assert in_range(150, None)
