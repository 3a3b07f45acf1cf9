"""
Named regex patterns for amounts and dates.

Order matters: extractors try patterns top to bottom and the first pattern
that claims a span wins it.
"""

import re
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class PatternSpec:
    """A named regex pattern with example and notes for documentation."""
    name: str
    pattern: str
    example: str
    notes: Optional[str] = None
    formats: Tuple[str, ...] = ()
    flags: int = 0
    compiled: re.Pattern = field(default=None, init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, 'compiled', re.compile(self.pattern, self.flags))


# A number must not continue a date, time, percentage or longer digit run
_NUM_START = r'(?<![\d.,/%\-])(?<!\d:)'
_NUM_END = r'(?![.,/:\-]?\d)(?!\s?%)'

AMOUNT_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec(
        name='dot_grouped_comma_decimal',
        pattern=_NUM_START + r'\d{1,3}(?:\.\d{3})+,\d{2}' + _NUM_END,
        example='1.234,56',
        notes='Turkish / continental grouping',
    ),
    PatternSpec(
        name='comma_grouped_dot_decimal',
        pattern=_NUM_START + r'\d{1,3}(?:,\d{3})+\.\d{2}' + _NUM_END,
        example='1,234.56',
        notes='International grouping',
    ),
    PatternSpec(
        name='space_grouped',
        pattern=_NUM_START + r'\d{1,3}(?: \d{3})+[.,]\d{2}' + _NUM_END,
        example='1 234,56',
    ),
    PatternSpec(
        name='plain_decimal',
        pattern=_NUM_START + r'\d+[.,]\d{2}' + _NUM_END,
        example='42,50',
    ),
    PatternSpec(
        name='bare_integer',
        pattern=_NUM_START + r'(?:\d{1,3}(?:[.,]\d{3})+|\d{2,})' + _NUM_END,
        example='450',
        notes='Last resort; also grouped integers such as 1.250',
    ),
)

DATE_PATTERNS: Tuple[PatternSpec, ...] = (
    PatternSpec(
        name='day_month_year',
        pattern=r'(?<!\d)(\d{2}[./]\d{2}[./]\d{4})(?!\d)',
        example='01.03.2024',
        formats=('%d.%m.%Y', '%d/%m/%Y'),
    ),
    PatternSpec(
        name='day_month_short_year',
        pattern=r'(?<!\d)(\d{2}[./]\d{2}[./]\d{2})(?!\d)',
        example='01.03.24',
        notes='Two-digit years pivot at 69 (strptime %y)',
        formats=('%d.%m.%y', '%d/%m/%y'),
    ),
    PatternSpec(
        name='iso_date',
        pattern=r'(?<!\d)(\d{4}-\d{2}-\d{2})(?!\d)',
        example='2024-03-01',
        formats=('%Y-%m-%d',),
    ),
)

# Shape checks used to reject merchant-name lines
DATE_SHAPE = re.compile(r'\d{2}[./]\d{2}[./]\d{2,4}')
AMOUNT_SHAPE = re.compile(r'\d+[.,]\d{2}')
