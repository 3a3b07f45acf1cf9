"""
Tests for total amount selection: exclusion lines, priority keywords,
context bonuses and the no-keyword fallback.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from decimal import Decimal

import pytest

from receipt_engine.services.parser import ReceiptParser
from receipt_engine.utils.money import extract_amount_candidates
from receipt_engine.utils.scoring import (
    score_amount_candidate,
    select_best_amount,
    select_top_amounts,
)
from receipt_engine.utils.text import normalize_lines


def best_total(text):
    parser = ReceiptParser()
    candidate = parser.extract_total_amount(normalize_lines(text))
    return candidate.value if candidate else None


class TestCandidateContext:
    """Context flags computed when a candidate is created."""

    def test_total_line_flags(self):
        candidate = extract_amount_candidates("TOPLAM 35,00 TL")[0]
        assert candidate.priority_keywords == ['toplam']
        assert candidate.has_currency is True
        assert candidate.is_last_token is True
        assert candidate.is_excluded is False

    def test_currency_symbol_before_number(self):
        candidate = extract_amount_candidates("TOTAL ₺35,00")[0]
        assert candidate.has_currency is True

    def test_number_followed_by_text_is_not_last_token(self):
        candidate = extract_amount_candidates("TOPLAM 35,00 KREDI KARTI")[0]
        assert candidate.is_last_token is False

    def test_distinct_keywords_are_counted(self):
        candidate = extract_amount_candidates("GENEL TOPLAM 85,00")[0]
        assert candidate.priority_keywords == ['genel toplam', 'toplam']

    def test_exclusion_keywords(self):
        assert extract_amount_candidates("NAKİT 500,00")[0].is_excluded is True
        assert extract_amount_candidates("NAKIT 500,00")[0].is_excluded is True
        assert extract_amount_candidates("PARA ÜSTÜ: 50.00")[0].is_excluded is True
        assert extract_amount_candidates("REFUND 5.00")[0].is_excluded is True

    def test_cashier_is_not_cash(self):
        candidate = extract_amount_candidates("CASHIER 2 TOTAL 35.00")[-1]
        assert candidate.is_excluded is False


class TestAmountScoring:

    def test_score_components(self):
        candidate = extract_amount_candidates("TOPLAM 35,00 TL")[0]
        # 2 (keyword) + 0.5 (currency) + 0.035 (magnitude) + 0.3 (last token)
        assert score_amount_candidate(candidate) == pytest.approx(2.835)

    def test_unlabelled_lines_do_not_compete(self):
        candidates = (
            extract_amount_candidates("ÜRÜN 900,00", 0)
            + extract_amount_candidates("TOPLAM 85,00", 1)
        )
        top = select_top_amounts(candidates)
        assert [c.value for c, _ in top] == [Decimal("85.00")]

    def test_empty_candidates(self):
        assert select_best_amount([]) is None


class TestTotalSelection:
    """End-to-end amount selection over whole receipts."""

    def test_cash_tendered_is_never_the_total(self):
        assert best_total("NAKİT 500,00\nTOPLAM 125,50") == Decimal("125.50")

    def test_change_and_cash_lines_are_skipped(self):
        text = "SHELL\nTUTAR: 450.00\nNAKİT: 500.00\nPARA ÜSTÜ: 50.00"
        assert best_total(text) == Decimal("450.00")

    def test_labelled_total_wins_regardless_of_magnitude(self):
        text = "ÜRÜN A 900,00\nÜRÜN B 750,00\nGENEL TOPLAM 85,00"
        assert best_total(text) == Decimal("85.00")

    def test_grand_total_beats_subtotal(self):
        text = "ARA TOPLAM 30,00\nKDV 5,00\nTOPLAM 35,00"
        assert best_total(text) == Decimal("35.00")

    def test_fallback_takes_largest_amount(self):
        assert best_total("SÜT 25,00\nEKMEK 10,00") == Decimal("25.00")

    def test_fallback_ignores_excluded_lines(self):
        assert best_total("SÜT 25,00\nNAKİT 500,00") == Decimal("25.00")

    def test_fallback_ignores_tiny_amounts(self):
        assert best_total("POŞET 0,50") is None

    def test_keyword_line_without_number_falls_back(self):
        assert best_total("TOPLAM\n42,90") == Decimal("42.90")

    def test_no_amount_at_all(self):
        assert best_total("Teşekkür ederiz") is None

    def test_total_glued_to_colon(self):
        assert best_total("MIGROS\nSÜT 25,00\nTOPLAM:35,00") == Decimal("35.00")
        assert best_total("KAFE\nTUTAR:450.00") == Decimal("450.00")
