"""
Receipt parser service for extracting structured data from OCR text.
"""

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from receipt_engine.config import Settings, settings as default_settings
from receipt_engine.errors import ReceiptTextError
from receipt_engine.models.receipt import ParsedReceipt, ReceiptItem
from receipt_engine.services.classifier import (
    CategoryClassifier,
    Embedder,
    HistoryEntry,
    TrainingSample,
    build_training_samples,
)
from receipt_engine.utils.candidates import (
    AmountCandidate,
    DateCandidate,
    create_date_candidate,
)
from receipt_engine.utils.keywords import (
    CURRENCY_CODES,
    CURRENCY_SYMBOLS,
    RECEIPT_VOCABULARY,
)
from receipt_engine.utils.money import extract_amount_candidates
from receipt_engine.utils.patterns import AMOUNT_SHAPE, DATE_PATTERNS, DATE_SHAPE
from receipt_engine.utils.scoring import select_best_amount
from receipt_engine.utils.text import fold, matching_keywords, normalize_lines

logger = logging.getLogger(__name__)

_CURRENCY_TOKEN = re.compile(
    '|'.join(re.escape(s) for s in CURRENCY_SYMBOLS)
    + r'|(?<![^\W\d_])(?:' + '|'.join(CURRENCY_CODES) + r')(?![^\W\d_])',
    re.IGNORECASE,
)
_EDGE_PUNCTUATION = ' \t:*-='

MIN_RECEIPT_VOCABULARY_HITS = 2
MIN_ITEM_NAME_LENGTH = 3


class ReceiptParser:
    """
    Service for parsing receipt text and extracting structured data.

    Instances hold only configuration and a classifier, are never mutated
    by parse(), and can be shared between threads.
    """

    def __init__(
        self,
        classifier: Optional[CategoryClassifier] = None,
        settings: Optional[Settings] = None,
        embedder: Optional[Embedder] = None
    ):
        """
        Args:
            classifier: Category classifier; built from settings if omitted
            settings: Configuration override (defaults to the module settings)
            embedder: Optional embedding capability for the semantic matcher,
                used only when no classifier is passed
        """
        self.settings = settings or default_settings
        self.classifier = classifier or CategoryClassifier(
            embedder=embedder, settings=self.settings
        )

    def parse(
        self,
        raw_text: str,
        merchant_hint: Optional[str] = None,
        history: Iterable[HistoryEntry] = (),
        training_samples: Optional[Sequence[TrainingSample]] = None
    ) -> ParsedReceipt:
        """
        Parse receipt text into a ParsedReceipt.

        Fields that cannot be detected are None; the category is always set.

        Args:
            raw_text: Text recovered by OCR or PDF extraction
            merchant_hint: Merchant name known by the caller, if any
            history: Caller's labelled transactions for history matching
            training_samples: Pre-built history samples (overrides history)

        Returns:
            ParsedReceipt

        Raises:
            ReceiptTextError: raw_text is None or not a string
        """
        if raw_text is None or not isinstance(raw_text, str):
            raise ReceiptTextError("Receipt text is required")

        lines = normalize_lines(raw_text)

        merchant_name = self.extract_merchant_name(lines)
        amount = self.extract_total_amount(lines)
        date_candidate = self.extract_date(lines)
        items = self.extract_items(lines)

        prediction = self.classifier.classify(
            raw_text,
            merchant_name=merchant_hint,
            history=history,
            training_samples=training_samples,
        )

        receipt = ParsedReceipt(
            merchant_name=merchant_name,
            total_amount=amount.value if amount else None,
            date=date_candidate.value if date_candidate else None,
            suggested_category=prediction.category,
            confidence=prediction.confidence,
            items=tuple(items),
            raw_text=raw_text,
        )

        logger.info("Parsed receipt", extra={
            'line_count': len(lines),
            'detected_fields': receipt.detected_fields,
            'category': prediction.category.value,
            'category_source': prediction.source,
            'confidence': prediction.confidence,
        })
        return receipt

    def parse_many(
        self,
        texts: Iterable[str],
        history: Iterable[HistoryEntry] = (),
        training_samples: Optional[Sequence[TrainingSample]] = None
    ) -> List[ParsedReceipt]:
        """Parse several receipts sequentially, sharing one set of history samples."""
        if training_samples is None:
            training_samples = build_training_samples(history)
        return [self.parse(text, training_samples=training_samples) for text in texts]

    def extract_merchant_name(self, lines: List[str]) -> Optional[str]:
        """
        Pick the business name from the first few lines.

        The first line of acceptable length that does not start with a digit
        and holds no date or amount shape wins. No scoring: the classifier
        works on the full text, so a wrong guess rarely changes the category.
        """
        for line in lines[:self.settings.MERCHANT_SCAN_LINES]:
            if not (self.settings.MERCHANT_MIN_LENGTH <= len(line) <= self.settings.MERCHANT_MAX_LENGTH):
                continue
            if line[0].isdigit():
                continue
            if DATE_SHAPE.search(line) or AMOUNT_SHAPE.search(line):
                continue
            return line
        return None

    def extract_total_amount(self, lines: List[str]) -> Optional[AmountCandidate]:
        """
        Find the payable total.

        Returns:
            Winning AmountCandidate, or None when no amount was detected
        """
        candidates: List[AmountCandidate] = []
        for index, line in enumerate(lines):
            candidates.extend(extract_amount_candidates(line, index))

        return select_best_amount(candidates, self.settings.MIN_FALLBACK_AMOUNT)

    def extract_date(self, lines: List[str]) -> Optional[DateCandidate]:
        """
        Find the first real calendar date in the first lines.

        Patterns are tried in order on each line; a structural match that no
        format can parse (e.g. 31.02.2024) is skipped.
        """
        for position, line in enumerate(lines[:self.settings.DATE_SCAN_LINES]):
            for spec in DATE_PATTERNS:
                for match in spec.compiled.finditer(line):
                    date_str = match.group(1)
                    for date_format in spec.formats:
                        try:
                            parsed = datetime.strptime(date_str, date_format).date()
                        except ValueError:
                            continue
                        return create_date_candidate(
                            value=parsed,
                            pattern_name=spec.name,
                            match_span=match.span(1),
                            raw_text=date_str,
                            line_position=position,
                            date_format=date_format,
                        )
                    logger.debug("Skipping unparsable date", extra={'raw': date_str})
        return None

    def extract_items(self, lines: List[str]) -> List[ReceiptItem]:
        """
        Best-effort (name, amount) items for display.

        Never used for the total.
        """
        items = []
        for index, line in enumerate(lines):
            candidates = extract_amount_candidates(line, index)
            if not candidates:
                continue

            name = self._strip_spans(line, [c.match_span for c in candidates])
            name = _CURRENCY_TOKEN.sub(' ', name)
            name = ' '.join(name.split()).strip(_EDGE_PUNCTUATION)
            if len(name) < MIN_ITEM_NAME_LENGTH:
                continue

            for candidate in candidates:
                items.append(ReceiptItem(name=name, amount=candidate.value))
        return items

    @staticmethod
    def _strip_spans(line: str, spans: List[tuple[int, int]]) -> str:
        """Replace the given character spans with spaces."""
        chars = list(line)
        for start, end in spans:
            for i in range(start, end):
                chars[i] = ' '
        return ''.join(chars)

    @staticmethod
    def is_receipt_or_invoice(text: str) -> bool:
        """Whether text reads like a receipt at all (two or more receipt words)."""
        hits = matching_keywords(fold(text), RECEIPT_VOCABULARY)
        return len(hits) >= MIN_RECEIPT_VOCABULARY_HITS


def parse_receipt(
    raw_text: str,
    merchant_hint: Optional[str] = None,
    history: Iterable[HistoryEntry] = (),
    embedder: Optional[Embedder] = None
) -> ParsedReceipt:
    """
    Parse one receipt with a freshly constructed parser.

    Callers parsing many receipts should build one ReceiptParser and reuse it.
    """
    parser = ReceiptParser(embedder=embedder)
    return parser.parse(raw_text, merchant_hint=merchant_hint, history=history)
