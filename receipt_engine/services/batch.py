"""
Batch parsing for multi-receipt imports.

One receipt per worker. Every worker writes only its own slot of a
pre-sized result list, so no locking is needed.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, List, Optional, Sequence

from receipt_engine.models.receipt import ParsedReceipt
from receipt_engine.services.classifier import HistoryEntry, build_training_samples
from receipt_engine.services.parser import ReceiptParser

logger = logging.getLogger(__name__)


def parse_batch(
    parser: ReceiptParser,
    texts: Sequence[str],
    history: Iterable[HistoryEntry] = (),
    max_workers: Optional[int] = None
) -> List[ParsedReceipt]:
    """
    Parse many receipts in parallel.

    Args:
        parser: Shared parser instance (read-only during parsing)
        texts: Receipt texts; result order matches input order
        history: Caller's labelled transactions, turned into samples once
        max_workers: Worker count (defaults to BATCH_MAX_WORKERS)

    Returns:
        ParsedReceipt per input text, in input order

    Raises:
        ReceiptTextError: if any input is not text; raised after all
            workers finish
    """
    if not texts:
        return []

    workers = max_workers or parser.settings.BATCH_MAX_WORKERS
    samples = build_training_samples(history)

    if workers <= 1 or len(texts) == 1:
        return parser.parse_many(texts, training_samples=samples)

    results: List[Optional[ParsedReceipt]] = [None] * len(texts)
    errors = []

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="receipt_parse") as executor:
        future_to_idx = {
            executor.submit(parser.parse, text, training_samples=samples): i
            for i, text in enumerate(texts)
        }
        for future in as_completed(future_to_idx):
            idx = future_to_idx[future]
            try:
                results[idx] = future.result()
            except Exception as e:
                logger.error("Failed to parse receipt in batch", extra={
                    'index': idx,
                    'error': str(e),
                })
                errors.append((idx, e))

    if errors:
        errors.sort(key=lambda x: x[0])
        raise errors[0][1]

    logger.info("Parsed receipt batch", extra={
        'count': len(results),
        'workers': workers,
        'detected_amounts': sum(1 for r in results if r.total_amount is not None),
    })
    return results
