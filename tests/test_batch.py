"""
Tests for batch parsing and the async text-source glue.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import asyncio
from decimal import Decimal

import pytest

from receipt_engine.errors import InvalidInputError, NoTextFoundError, ReceiptTextError
from receipt_engine.models.receipt import HistoricalTransaction, TransactionCategory
from receipt_engine.services.batch import parse_batch
from receipt_engine.services.intake import recognize_and_parse
from receipt_engine.services.parser import ReceiptParser


TEXTS = [f"FİŞ {i}\nTOPLAM {i + 10},00" for i in range(8)]


class StaticTextSource:

    def __init__(self, text):
        self.text = text

    async def extract_text(self, payload):
        await asyncio.sleep(0)
        return self.text


class UnreadableSource:

    async def extract_text(self, payload):
        raise InvalidInputError()


class TestParseBatch:

    def test_results_follow_input_order(self):
        receipts = parse_batch(ReceiptParser(), TEXTS, max_workers=3)
        assert [r.total_amount for r in receipts] == [Decimal(f"{i + 10}.00") for i in range(8)]

    def test_single_worker(self):
        receipts = parse_batch(ReceiptParser(), TEXTS[:2], max_workers=1)
        assert [r.total_amount for r in receipts] == [Decimal("10.00"), Decimal("11.00")]

    def test_empty_batch(self):
        assert parse_batch(ReceiptParser(), []) == []

    def test_history_is_shared_by_all_receipts(self):
        history = [
            HistoricalTransaction(title="Kahve Keyfi", category="entertainment")
            for _ in range(3)
        ]
        receipts = parse_batch(ReceiptParser(), ["kahve keyfi", "kahve keyfi"], history=history, max_workers=2)
        assert all(r.suggested_category == TransactionCategory.ENTERTAINMENT for r in receipts)

    def test_bad_input_raises_after_batch(self):
        with pytest.raises(ReceiptTextError):
            parse_batch(ReceiptParser(), ["TOPLAM 10,00", None, "TOPLAM 20,00"], max_workers=2)


class TestRecognizeAndParse:

    def test_recognized_text_is_parsed(self):
        source = StaticTextSource("MIGROS\nTOPLAM 35,00 TL")
        receipt = asyncio.run(recognize_and_parse(source, b"image", ReceiptParser()))
        assert receipt.total_amount == Decimal("35.00")
        assert receipt.suggested_category == TransactionCategory.FOOD

    def test_blank_text_is_no_text_found(self):
        source = StaticTextSource("  \n ")
        with pytest.raises(NoTextFoundError):
            asyncio.run(recognize_and_parse(source, b"image", ReceiptParser()))

    def test_source_errors_propagate(self):
        with pytest.raises(InvalidInputError) as exc_info:
            asyncio.run(recognize_and_parse(UnreadableSource(), b"", ReceiptParser()))
        assert str(exc_info.value) == "Invalid image or PDF input"
