"""
Tests for line normalization and Turkish-aware keyword matching.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from receipt_engine.utils.text import (
    contains_keyword,
    fold,
    lower,
    matching_keywords,
    normalize_lines,
    tokenize,
)


class TestNormalizeLines:

    def test_trims_and_drops_empty_lines(self):
        assert normalize_lines("  MIGROS \n\n   \r\nTOPLAM 35,00\r\n") == ["MIGROS", "TOPLAM 35,00"]

    def test_composes_decomposed_glyphs(self):
        # I + combining dot above becomes the single dotted capital İ
        assert normalize_lines("İSTANBUL") == ["İSTANBUL"]

    def test_empty_text(self):
        assert normalize_lines("") == []


class TestFold:

    def test_dotted_and_dotless_i_fold_together(self):
        assert fold("NAKİT") == "nakit"
        assert fold("NAKIT") == "nakit"
        assert fold("nakıt") == "nakit"

    def test_other_turkish_letters_are_kept(self):
        assert fold("PARA ÜSTÜ") == "para üstü"
        assert fold("ÖDENECEK") == "ödenecek"

    def test_lower_keeps_dotless_i(self):
        assert lower("İSTANBUL") == "istanbul"
        assert lower("Alışveriş") == "alışveriş"


class TestKeywordMatching:

    def test_short_keywords_need_whole_words(self):
        assert contains_keyword("bp istasyonu", "bp") is True
        assert contains_keyword("abpx market", "bp") is False
        assert contains_keyword("ayran su", "su") is True
        assert contains_keyword("sucuk", "su") is False

    def test_long_keywords_match_inside_words(self):
        assert contains_keyword("geneltoplam 35,00", "toplam") is True

    def test_matching_keywords_are_distinct_and_ordered(self):
        hits = matching_keywords("sinema bileti sinema", ("bilet", "sinema", "konser"))
        assert hits == ["bilet", "sinema"]


class TestTokenize:

    def test_empty_tokens_are_kept(self):
        assert tokenize(" starbucks kahve") == {"", "starbucks", "kahve"}
        assert tokenize("starbucks kahve ") == {"starbucks", "kahve", ""}

    def test_single_spaces(self):
        assert tokenize("a b") == {"a", "b"}
