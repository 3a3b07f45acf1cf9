"""
Scoring functions for amount candidates.

Unlike a normalized 0-1 score, the amount context score is additive:
each distinct total keyword on the line is worth more than every other
signal combined, so a labelled total wins over an unlabelled number.
"""

import logging
from decimal import Decimal
from typing import Iterable, List, Optional

from receipt_engine.utils.candidates import AmountCandidate

__all__ = [
    'score_amount_candidate', 'select_best_amount', 'select_top_amounts',
    'PRIORITY_KEYWORD_WEIGHT', 'CURRENCY_BONUS', 'LAST_TOKEN_BONUS',
    'MAGNITUDE_DIVISOR',
]

logger = logging.getLogger(__name__)

PRIORITY_KEYWORD_WEIGHT = 2.0  # Per distinct total keyword on the line
CURRENCY_BONUS = 0.5  # Currency symbol or code next to the number
LAST_TOKEN_BONUS = 0.3  # Totals are usually printed at the end of the line
MAGNITUDE_DIVISOR = 1000  # Tax and subtotal lines are usually smaller


def score_amount_candidate(candidate: AmountCandidate) -> float:
    """
    Score amount candidate based on its line context.

    Scoring factors (weights):
    - Priority keywords: +2.0 per distinct keyword ("toplam", "total")
    - Currency adjacency: +0.5 if "TL", "₺", "$" touches the number
    - Magnitude bonus: + value / 1000
    - Last token: +0.3 if only currency markers follow the number

    Args:
        candidate: AmountCandidate to score (must not be excluded)

    Returns:
        Unbounded non-negative score
    """
    score = PRIORITY_KEYWORD_WEIGHT * len(candidate.priority_keywords)

    if candidate.has_currency:
        score += CURRENCY_BONUS

    score += float(candidate.value) / MAGNITUDE_DIVISOR

    if candidate.is_last_token:
        score += LAST_TOKEN_BONUS

    return score


def select_top_amounts(
    candidates: Iterable[AmountCandidate],
    top_n: int = 3
) -> List[tuple[AmountCandidate, float]]:
    """
    Score keyword-labelled candidates and return the top N.

    Excluded candidates (cash, change, refund lines) are never scored, and
    candidates on lines without a priority keyword do not compete.

    Returns:
        List of (candidate, score) tuples, sorted by score descending;
        ties keep receipt order
    """
    scored = []
    for candidate in candidates:
        if candidate.is_excluded or not candidate.priority_keywords:
            continue
        candidate.score = score_amount_candidate(candidate)
        scored.append((candidate, candidate.score))

    # sort() is stable, so equal scores keep the earliest candidate first
    scored.sort(key=lambda x: x[1], reverse=True)
    return scored[:top_n]


def select_best_amount(
    candidates: List[AmountCandidate],
    min_fallback_amount: float = 1.0
) -> Optional[AmountCandidate]:
    """
    Select the single best total amount candidate.

    Args:
        candidates: AmountCandidate objects from every receipt line
        min_fallback_amount: Smallest value the no-keyword fallback accepts

    Returns:
        Winning candidate, or None when no amount was detected
    """
    if not candidates:
        return None

    top = select_top_amounts(candidates, top_n=1)
    if top:
        best, best_score = top[0]
        logger.debug("Selected labelled amount", extra={
            'amount': str(best.value),
            'score': best_score,
            'line_index': best.line_index,
        })
        return best

    # No labelled total: take the largest plausible amount
    threshold = Decimal(str(min_fallback_amount))
    best = None
    for candidate in candidates:
        if candidate.is_excluded or candidate.value < threshold:
            continue
        if best is None or candidate.value > best.value:
            best = candidate

    if best is not None:
        logger.debug("Selected fallback amount", extra={
            'amount': str(best.value),
            'line_index': best.line_index,
        })
    return best
