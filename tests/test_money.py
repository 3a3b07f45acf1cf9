"""
Tests for amount normalization and per-line candidate extraction.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from decimal import Decimal

import pytest

from receipt_engine.utils.money import (
    extract_amount_candidates,
    extract_amounts,
    normalize_amount,
)


class TestNormalizeAmount:
    """Every supported format normalizes to the same canonical Decimal."""

    @pytest.mark.parametrize("raw", ["1.234,56", "1,234.56", "1 234,56", "1 234.56"])
    def test_grouped_formats_agree(self, raw):
        assert normalize_amount(raw) == Decimal("1234.56")

    def test_plain_decimals(self):
        assert normalize_amount("42,50") == Decimal("42.50")
        assert normalize_amount("42.50") == Decimal("42.50")

    def test_lone_separator_without_two_decimals_is_grouping(self):
        assert normalize_amount("1,234") == Decimal("1234")
        assert normalize_amount("1.250") == Decimal("1250")
        assert normalize_amount("1.234.567") == Decimal("1234567")

    def test_currency_markers_are_ignored(self):
        assert normalize_amount("₺42,50") == Decimal("42.50")
        assert normalize_amount("35,00 TL") == Decimal("35.00")
        assert normalize_amount("$1,234.56") == Decimal("1234.56")

    def test_non_positive_and_garbage_are_discarded(self):
        assert normalize_amount("0,00") is None
        assert normalize_amount("abc") is None
        assert normalize_amount("") is None
        assert normalize_amount(None) is None


class TestExtractAmounts:
    """Pattern order, span claiming and per-line de-duplication."""

    def test_turkish_grouping_is_not_split(self):
        # "234,56" must not be picked up inside "1.234,56"
        assert extract_amounts("1.234,56") == [Decimal("1234.56")]

    def test_international_grouping(self):
        assert extract_amounts("1,234.56") == [Decimal("1234.56")]

    def test_space_grouping(self):
        assert extract_amounts("TOPLAM 1 234,56 TL") == [Decimal("1234.56")]

    def test_pattern_names(self):
        candidates = extract_amount_candidates("1.234,56")
        assert candidates[0].pattern_name == 'dot_grouped_comma_decimal'
        assert candidates[0].raw_text == "1.234,56"
        assert candidates[0].match_span == (0, 8)

    def test_same_value_returned_once_per_line(self):
        assert extract_amounts("SÜT 25,00 25,00") == [Decimal("25.00")]

    def test_several_amounts_on_one_line(self):
        assert extract_amounts("2 X 12,50 25,00") == [Decimal("12.50"), Decimal("25.00")]

    def test_dates_and_times_are_not_amounts(self):
        assert extract_amounts("01.03.2024") == []
        assert extract_amounts("15/06/23") == []
        assert extract_amounts("SAAT 14:35") == []
        assert extract_amounts("2024-03-01") == []

    def test_percentages_are_not_amounts(self):
        assert extract_amounts("KDV %18 5,40") == [Decimal("5.40")]

    def test_bare_integers_are_last_resort(self):
        assert extract_amounts("TUTAR 450") == [Decimal("450")]
        # single digits are never amounts
        assert extract_amounts("ADET 3") == []

    def test_line_without_numbers(self):
        assert extract_amounts("MIGROS TİCARET") == []

    def test_amount_glued_to_punctuation(self):
        assert extract_amounts("X:12,50") == [Decimal("12.50")]
        assert extract_amounts("TOPLAM:1.234,56") == [Decimal("1234.56")]
        assert extract_amounts("*35,00") == [Decimal("35.00")]

    def test_time_after_colon_is_not_an_amount(self):
        assert extract_amounts("SAAT:14:35") == []
