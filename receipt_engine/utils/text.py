"""
Line normalization and locale-aware keyword matching.

OCR output mixes Turkish and ASCII glyphs for the same letter
("NAKİT", "NAKIT", "nakıt"), so matching always runs on folded text.
"""

import re
import unicodedata
from functools import lru_cache
from typing import Iterable, List

_WHITESPACE = re.compile(r'\s')


def normalize_text(text: str) -> str:
    """Apply Unicode canonical composition (NFC)."""
    return unicodedata.normalize('NFC', text)


def normalize_lines(text: str) -> List[str]:
    """
    Split raw receipt text into trimmed, non-empty lines.

    Args:
        text: Raw multi-line text from OCR or PDF extraction

    Returns:
        List of NFC-normalized lines in original order
    """
    return [
        line.strip()
        for line in normalize_text(text).splitlines()
        if line.strip()
    ]


def lower(text: str) -> str:
    """Lowercase without leaving a combining dot behind dotted capital İ."""
    return normalize_text(text).replace('İ', 'i').lower()


def fold(text: str) -> str:
    """
    Case-fold text for keyword matching.

    Dotted capital İ becomes i before lowercasing (str.lower() would leave
    a combining dot behind), and dotless ı is folded onto i.

    Examples:
        >>> fold("NAKİT")
        'nakit'
        >>> fold("NAKIT")
        'nakit'
    """
    text = lower(text)
    return text.replace('\u0307', '').replace('ı', 'i')


@lru_cache(maxsize=None)
def _word_pattern(keyword: str) -> re.Pattern:
    return re.compile(r'(?<!\w)' + re.escape(keyword) + r'(?!\w)')


def contains_keyword(folded_text: str, keyword: str) -> bool:
    """
    Check whether a folded keyword occurs in folded text.

    Keywords of three characters or fewer ("bp", "su", "şok") must match a
    whole word; longer keywords match anywhere, so "geneltoplam" still hits
    "toplam".
    """
    if len(keyword) <= 3:
        return _word_pattern(keyword).search(folded_text) is not None
    return keyword in folded_text


def contains_word(folded_text: str, keyword: str) -> bool:
    """Whole-word match regardless of keyword length."""
    return _word_pattern(keyword).search(folded_text) is not None


def matching_keywords(folded_text: str, keywords: Iterable[str]) -> List[str]:
    """Distinct keywords present in the text, in keyword order."""
    seen = []
    for keyword in keywords:
        if keyword not in seen and contains_keyword(folded_text, keyword):
            seen.append(keyword)
    return seen


def tokenize(folded_text: str) -> set:
    """
    Token set used for history similarity.

    Splits on every single whitespace character and keeps the empty tokens
    that leading, trailing or repeated whitespace produce, so " a b" and
    "a b " share the empty token.
    """
    return set(_WHITESPACE.split(folded_text))
