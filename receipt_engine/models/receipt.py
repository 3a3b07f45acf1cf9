"""
Pydantic models for parsed receipts and caller-supplied history.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, Field


class TransactionCategory(str, Enum):
    """Standard spending categories the classifier can suggest."""
    FOOD = "food"
    TRANSPORT = "transport"
    SHOPPING = "shopping"
    BILLS = "bills"
    ENTERTAINMENT = "entertainment"
    HEALTH = "health"
    EDUCATION = "education"
    SALARY = "salary"
    INVESTMENT = "investment"
    OTHER = "other"

    @property
    def label(self) -> str:
        """Turkish display label, also embedded by the semantic matcher."""
        return _CATEGORY_LABELS[self]

    @classmethod
    def from_id(cls, category_id: str) -> Optional["TransactionCategory"]:
        """Resolve a category id, returning None for custom categories."""
        try:
            return cls(category_id)
        except ValueError:
            return None


_CATEGORY_LABELS = {
    TransactionCategory.FOOD: "Yemek",
    TransactionCategory.TRANSPORT: "Ulaşım",
    TransactionCategory.SHOPPING: "Alışveriş",
    TransactionCategory.BILLS: "Faturalar",
    TransactionCategory.ENTERTAINMENT: "Eğlence",
    TransactionCategory.HEALTH: "Sağlık",
    TransactionCategory.EDUCATION: "Eğitim",
    TransactionCategory.SALARY: "Maaş",
    TransactionCategory.INVESTMENT: "Yatırım",
    TransactionCategory.OTHER: "Diğer",
}

DEFAULT_CATEGORY = TransactionCategory.SHOPPING


class ReceiptItem(BaseModel):
    """Display-only line item."""
    name: str
    amount: Decimal

    class Config:
        frozen = True


class ParsedReceipt(BaseModel):
    """Structured transaction candidate extracted from receipt text."""
    merchant_name: Optional[str] = None
    total_amount: Optional[Decimal] = Field(default=None, ge=0)
    date: Optional[datetime.date] = None
    suggested_category: TransactionCategory = DEFAULT_CATEGORY
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    items: Tuple[ReceiptItem, ...] = ()
    raw_text: str = ""

    class Config:
        frozen = True

    @property
    def detected_fields(self) -> List[str]:
        """Names of the extracted fields that were found, in display order."""
        fields = []
        if self.merchant_name is not None:
            fields.append("merchant")
        if self.total_amount is not None:
            fields.append("amount")
        if self.date is not None:
            fields.append("date")
        return fields

    @property
    def is_empty(self) -> bool:
        """True when recognition likely failed and manual entry is needed."""
        return not self.detected_fields


class HistoricalTransaction(BaseModel):
    """A past transaction the user already labelled.

    category may be a standard category id or the opaque id of a
    user-defined category.
    """
    title: str
    note: Optional[str] = ""
    category: Union[TransactionCategory, str]
