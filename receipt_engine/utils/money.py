"""
Money parsing utilities with multi-locale support.

Handles the number formats seen on receipts:
- Turkish / continental: 1.234,56
- International: 1,234.56
- Space grouped: 1 234,56 or 1 234.56
- Plain decimals: 42,50 or 42.50
- Bare integers as a last resort: 450 or 1.250
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from receipt_engine.utils.candidates import AmountCandidate, create_amount_candidate
from receipt_engine.utils.keywords import CURRENCY_CODES, CURRENCY_SYMBOLS
from receipt_engine.utils.patterns import AMOUNT_PATTERNS

logger = logging.getLogger(__name__)

_CURRENCY_PATTERN = re.compile(
    '|'.join(re.escape(s) for s in CURRENCY_SYMBOLS)
    + r'|\b(?:' + '|'.join(CURRENCY_CODES) + r')\b',
    re.IGNORECASE,
)


def normalize_amount(amount_str: str) -> Optional[Decimal]:
    """
    Normalize a matched amount substring to a canonical Decimal.

    When both '.' and ',' appear, the separator followed by exactly two
    trailing digits is the decimal point and the other is a group separator.
    When only one kind appears, it is the decimal point only if it occurs
    once with exactly two digits after it.

    Args:
        amount_str: Matched substring (e.g., "1.234,56", "1 234.56", "₺42,50")

    Returns:
        Decimal amount, or None if unparsable or not positive

    Examples:
        >>> normalize_amount("1.234,56")
        Decimal('1234.56')
        >>> normalize_amount("1,234.56")
        Decimal('1234.56')
        >>> normalize_amount("1,234")
        Decimal('1234')
    """
    if not amount_str or not isinstance(amount_str, str):
        return None

    cleaned = _CURRENCY_PATTERN.sub('', amount_str)
    cleaned = re.sub(r'\s', '', cleaned)
    if not cleaned:
        return None

    decimal_sep = _detect_decimal_separator(cleaned)
    for sep in '.,':
        if sep != decimal_sep:
            cleaned = cleaned.replace(sep, '')
    if decimal_sep:
        cleaned = cleaned.replace(decimal_sep, '.')

    try:
        result = Decimal(cleaned)
    except (InvalidOperation, ValueError):
        logger.debug("Skipping unparsable amount", extra={'raw': amount_str})
        return None

    if not result.is_finite() or result <= 0:
        return None

    return result


def _detect_decimal_separator(amount_str: str) -> Optional[str]:
    """
    Decide which separator, if any, is the decimal point.

    Only the last separator can be decimal, and only when exactly two
    digits follow it. A lone kind of separator that repeats ("1.234.567")
    is always grouping.
    """
    last = max(amount_str.rfind('.'), amount_str.rfind(','))
    if last == -1:
        return None

    sep = amount_str[last]
    if not re.fullmatch(r'\d{2}', amount_str[last + 1:]):
        return None

    other = ',' if sep == '.' else '.'
    if other not in amount_str and amount_str.count(sep) > 1:
        return None

    return sep


def extract_amount_candidates(line: str, line_index: int = 0) -> List[AmountCandidate]:
    """
    Find every amount on a line, in pattern priority order.

    A later pattern never matches inside a span an earlier pattern already
    claimed, and the same value is never returned twice for one line.

    Args:
        line: A single normalized receipt line
        line_index: Position of the line in the receipt

    Returns:
        List of AmountCandidate objects (possibly empty)
    """
    candidates: List[AmountCandidate] = []
    claimed: List[tuple[int, int]] = []
    seen_values = set()

    for spec in AMOUNT_PATTERNS:
        for match in spec.compiled.finditer(line):
            start, end = match.span()
            if any(start < c_end and c_start < end for c_start, c_end in claimed):
                continue
            claimed.append((start, end))

            value = normalize_amount(match.group(0))
            if value is None or value in seen_values:
                continue
            seen_values.add(value)

            candidates.append(create_amount_candidate(
                value=value,
                pattern_name=spec.name,
                match_span=(start, end),
                raw_text=match.group(0),
                line=line,
                line_index=line_index,
            ))

    return candidates


def extract_amounts(line: str) -> List[Decimal]:
    """Normalized amounts found on a line."""
    return [c.value for c in extract_amount_candidates(line)]
