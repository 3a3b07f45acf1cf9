"""
Candidate dataclasses for extraction scoring.

Each candidate represents a potential extracted value with metadata
used for scoring and selection.
"""

import datetime
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List

from receipt_engine.utils.keywords import (
    CURRENCY_CODES,
    CURRENCY_SYMBOLS,
    EXCLUSION_KEYWORDS,
    PRIORITY_KEYWORDS,
)
from receipt_engine.utils.text import contains_word, fold, matching_keywords

_CURRENCY = (
    '(?:' + '|'.join(re.escape(s) for s in CURRENCY_SYMBOLS)
    + r'|(?<![^\W\d_])(?:' + '|'.join(CURRENCY_CODES) + r')(?![^\W\d_]))'
)
_CURRENCY_BEFORE = re.compile(_CURRENCY + r'\s*$', re.IGNORECASE)
_CURRENCY_AFTER = re.compile(r'^\s*' + _CURRENCY, re.IGNORECASE)
_TRAILING_CURRENCY = re.compile(r'^(?:\s*' + _CURRENCY + r')*[\s.:*]*$', re.IGNORECASE)


@dataclass
class Candidate:
    """Base class for extraction candidates."""
    value: Any
    pattern_name: str
    match_span: tuple[int, int]  # (start, end) character positions in the line
    raw_text: str = ""  # Original matched text


@dataclass
class AmountCandidate(Candidate):
    """
    Candidate for an extracted amount on one receipt line.

    Scoring factors:
    - priority_keywords: distinct total keywords on the line ("toplam")
    - is_excluded: line states cash tendered, change or a refund
    - has_currency: currency symbol or code directly next to the number
    - is_last_token: nothing but currency markers follows the number
    """
    value: Decimal
    line: str = ""
    line_index: int = 0
    priority_keywords: List[str] = field(default_factory=list)
    is_excluded: bool = False
    has_currency: bool = False
    is_last_token: bool = False
    score: float = 0.0


@dataclass
class DateCandidate(Candidate):
    """Candidate for an extracted date."""
    value: datetime.date
    line_position: int = 0
    date_format: str = ""


def create_amount_candidate(
    value: Decimal,
    pattern_name: str,
    match_span: tuple[int, int],
    raw_text: str,
    line: str,
    line_index: int
) -> AmountCandidate:
    """
    Create AmountCandidate with computed context flags.

    Args:
        value: Normalized amount
        pattern_name: Name of pattern that matched
        match_span: Character span of match within the line
        raw_text: Original matched text
        line: The full line the amount came from
        line_index: Position of the line in the receipt

    Returns:
        AmountCandidate with computed flags
    """
    folded = fold(line)
    start, end = match_span

    is_excluded = any(contains_word(folded, kw) for kw in EXCLUSION_KEYWORDS)
    priority_keywords = [] if is_excluded else matching_keywords(folded, PRIORITY_KEYWORDS)

    before, after = line[:start], line[end:]
    has_currency = bool(_CURRENCY_BEFORE.search(before) or _CURRENCY_AFTER.search(after))
    is_last_token = bool(_TRAILING_CURRENCY.match(after))

    return AmountCandidate(
        value=value,
        pattern_name=pattern_name,
        match_span=match_span,
        raw_text=raw_text,
        line=line,
        line_index=line_index,
        priority_keywords=priority_keywords,
        is_excluded=is_excluded,
        has_currency=has_currency,
        is_last_token=is_last_token,
    )


def create_date_candidate(
    value: datetime.date,
    pattern_name: str,
    match_span: tuple[int, int],
    raw_text: str,
    line_position: int,
    date_format: str
) -> DateCandidate:
    """Create DateCandidate for a successfully parsed date substring."""
    return DateCandidate(
        value=value,
        pattern_name=pattern_name,
        match_span=match_span,
        raw_text=raw_text,
        line_position=line_position,
        date_format=date_format,
    )
