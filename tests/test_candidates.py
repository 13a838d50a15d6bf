"""Tests for the candidate text filter."""

from evanaliz.config import CandidateConfig
from evanaliz.parsing.candidates import (
    clean_text,
    contains_important_label,
    contains_large_number,
    filter_candidates,
    is_candidate,
    label_key,
    normalize_number_format,
)


class TestIsCandidate:
    def test_blank_and_short(self):
        assert not is_candidate(None)
        assert not is_candidate("")
        assert not is_candidate("  ")
        assert not is_candidate("TL")

    def test_label(self):
        assert is_candidate("Fiyat")
        assert is_candidate("Price")

    def test_currency(self):
        assert is_candidate("25 TL")
        assert is_candidate("₺ 900")

    def test_large_number(self):
        assert is_candidate("1234")
        assert is_candidate("3.500.000")

    def test_small_number_without_currency(self):
        assert not is_candidate("123")

    def test_coordinate(self):
        assert is_candidate("@40.8736,29.3064")

    def test_plain_words(self):
        assert not is_candidate("Kira")
        assert not is_candidate("Satılık daire")

    def test_custom_digit_threshold(self):
        cfg = CandidateConfig(min_digit_count=6)
        assert not contains_large_number("25.000", cfg)
        assert contains_large_number("250.000", cfg)


class TestCleanText:
    def test_nbsp_and_whitespace(self):
        assert clean_text("  3.500.000\u00a0TL \n ") == "3.500.000 TL"

    def test_no_numeric_conversion(self):
        assert clean_text("25,000.50") == "25,000.50"


def test_normalize_number_format():
    assert normalize_number_format("3.500.000 TL") == "3500000 TL"
    assert normalize_number_format("Fiyat: 1.250.000") == "Fiyat: 1250000"


def test_filter_candidates_keeps_order():
    texts = ["Kira", "Fiyat", "5.000.000 TL", "3+1", "25.000 TL"]
    assert filter_candidates(texts) == ["Fiyat", "5.000.000 TL", "25.000 TL"]


def test_turkish_dotted_capital_label():
    assert label_key(" FİYAT ") == "fiyat"
    assert contains_important_label("FİYAT")
    assert contains_important_label("Satış Fiyatı")
    assert filter_candidates(["12.000.000 TL", "FİYAT", "5.000.000 TL"]) == [
        "12.000.000 TL",
        "FİYAT",
        "5.000.000 TL",
    ]
