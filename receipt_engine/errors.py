"""
Exceptions raised by the receipt engine and its text capabilities.

Nothing-found situations are not errors: the parser reports them as
absent fields on ParsedReceipt.
"""

from typing import Optional


class ReceiptEngineError(Exception):
    """Base class for receipt engine errors."""


class ReceiptTextError(ReceiptEngineError, ValueError):
    """Raised when the parser is called without any text at all."""


class TextExtractionError(ReceiptEngineError):
    """Raised by a text source (OCR, PDF) that could not produce text."""

    message = "Text could not be extracted"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class InvalidInputError(TextExtractionError):
    """The image or PDF payload could not be opened."""

    message = "Invalid image or PDF input"


class NoTextFoundError(TextExtractionError):
    """The payload was readable but contained no text."""

    message = "No text found in input"
