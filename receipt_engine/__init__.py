"""
Receipt text parsing engine.

Turns OCR or PDF-extracted receipt text into a ParsedReceipt: merchant,
total, date, line items and a suggested spending category.
"""

from receipt_engine.errors import (
    InvalidInputError,
    NoTextFoundError,
    ReceiptEngineError,
    ReceiptTextError,
    TextExtractionError,
)
from receipt_engine.models.receipt import (
    HistoricalTransaction,
    ParsedReceipt,
    ReceiptItem,
    TransactionCategory,
)
from receipt_engine.services.batch import parse_batch
from receipt_engine.services.classifier import (
    CategoryClassifier,
    CategoryPrediction,
    Embedder,
    TrainingSample,
    build_training_samples,
)
from receipt_engine.services.intake import TextSource, recognize_and_parse
from receipt_engine.services.parser import ReceiptParser, parse_receipt

__all__ = [
    'CategoryClassifier', 'CategoryPrediction', 'Embedder', 'HistoricalTransaction',
    'InvalidInputError', 'NoTextFoundError', 'ParsedReceipt', 'ReceiptEngineError',
    'ReceiptItem', 'ReceiptParser', 'ReceiptTextError', 'TextExtractionError',
    'TextSource', 'TrainingSample', 'TransactionCategory', 'build_training_samples',
    'parse_batch', 'parse_receipt', 'recognize_and_parse',
]
