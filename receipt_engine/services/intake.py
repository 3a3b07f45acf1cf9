"""
Glue between asynchronous text capabilities (OCR, PDF extraction) and the
synchronous parser.

The capabilities themselves live outside this package; they only need to
implement TextSource.
"""

import logging
from typing import Iterable, Optional, Protocol

from receipt_engine.errors import NoTextFoundError, TextExtractionError
from receipt_engine.models.receipt import ParsedReceipt
from receipt_engine.services.classifier import HistoryEntry
from receipt_engine.services.parser import ReceiptParser

logger = logging.getLogger(__name__)


class TextSource(Protocol):
    """Turns an image or PDF payload into UTF-8 text."""

    async def extract_text(self, payload: bytes) -> str:
        """
        Raises:
            InvalidInputError: payload cannot be opened
            NoTextFoundError: payload holds no text
        """
        ...


async def recognize_and_parse(
    source: TextSource,
    payload: bytes,
    parser: ReceiptParser,
    merchant_hint: Optional[str] = None,
    history: Iterable[HistoryEntry] = ()
) -> ParsedReceipt:
    """
    Await the text capability, then parse the text synchronously.

    Args:
        source: OCR or PDF text capability
        payload: Raw image or PDF bytes
        parser: Shared parser instance
        merchant_hint: Merchant name known by the caller, if any
        history: Caller's labelled transactions

    Returns:
        ParsedReceipt for the recognized text

    Raises:
        TextExtractionError: the capability failed or returned no text
    """
    try:
        text = await source.extract_text(payload)
    except TextExtractionError:
        logger.warning("Text extraction failed", exc_info=True)
        raise

    if not text or not text.strip():
        logger.warning("Text source returned no text", extra={'payload_size': len(payload)})
        raise NoTextFoundError()

    return parser.parse(text, merchant_hint=merchant_hint, history=history)
