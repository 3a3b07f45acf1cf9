"""
Category classifier for parsed receipts.

Four signals, strongest first:
1. Brand lookup (merchant identity, short-circuits everything else)
2. The user's own history of labelled transactions
3. Keyword rules vs. semantic similarity (higher confidence wins,
   ties go to the keyword rules)
4. The keyword matcher's default (shopping, 0.3)

No matcher keeps state between calls: rule tables are module constants and
history samples are rebuilt from the caller's transactions every time.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple, Union

from receipt_engine.config import Settings, settings as default_settings
from receipt_engine.models.receipt import (
    DEFAULT_CATEGORY,
    HistoricalTransaction,
    TransactionCategory,
)
from receipt_engine.utils.keywords import BRAND_GROUPS, CATEGORY_KEYWORDS
from receipt_engine.utils.text import fold, lower, matching_keywords, tokenize

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.3
KEYWORDS_FOR_FULL_CONFIDENCE = 3

SOURCE_BRAND = 'brand'
SOURCE_HISTORY = 'history'
SOURCE_KEYWORD = 'keyword'
SOURCE_SEMANTIC = 'semantic'
SOURCE_DEFAULT = 'default'


class Embedder(Protocol):
    """Optional sentence-embedding capability."""

    def embed(self, text: str) -> Optional[Sequence[float]]:
        """Return an embedding vector, or None if the text cannot be embedded."""
        ...


@dataclass(frozen=True)
class TrainingSample:
    """One labelled history entry, folded for matching."""
    normalized_text: str
    category: TransactionCategory
    tokens: frozenset = field(default=frozenset(), compare=False, repr=False)


@dataclass(frozen=True)
class CategoryPrediction:
    """A matcher's guess: category, confidence in [0, 1], and which matcher made it."""
    category: TransactionCategory
    confidence: float
    source: str


HistoryEntry = Union[HistoricalTransaction, dict]


def build_training_samples(history: Iterable[HistoryEntry]) -> List[TrainingSample]:
    """
    Build history samples from the caller's past transactions.

    Text is title + " " + note, folded and not stripped (see tokenize).
    Transactions in user-defined categories are skipped because the
    classifier only suggests standard categories.

    Args:
        history: HistoricalTransaction objects (or dicts with title/note/category)

    Returns:
        Fresh list of TrainingSample objects
    """
    samples = []
    for entry in history:
        if not isinstance(entry, HistoricalTransaction):
            entry = HistoricalTransaction.model_validate(entry)

        category = TransactionCategory.from_id(entry.category)
        if category is None:
            logger.debug("Skipping custom-category history entry", extra={
                'category': str(entry.category),
            })
            continue

        text = fold(f"{entry.title} {entry.note or ''}")
        samples.append(TrainingSample(
            normalized_text=text,
            category=category,
            tokens=frozenset(tokenize(text)),
        ))
    return samples


def jaccard_similarity(tokens_a: Iterable[str], tokens_b: Iterable[str]) -> float:
    """Token-set Jaccard similarity: |A ∩ B| / |A ∪ B|, 0.0 for two empty sets."""
    set_a, set_b = set(tokens_a), set(tokens_b)
    union = set_a | set_b
    if not union:
        return 0.0
    return len(set_a & set_b) / len(union)


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors.

    Returns 0.0 for vectors of different length or with zero magnitude.
    """
    if len(vec1) != len(vec2):
        return 0.0

    dot_product = sum(a * b for a, b in zip(vec1, vec2))
    magnitude1 = math.sqrt(sum(a * a for a in vec1))
    magnitude2 = math.sqrt(sum(b * b for b in vec2))

    denominator = magnitude1 * magnitude2
    if denominator == 0:
        return 0.0
    return dot_product / denominator


class BrandMatcher:
    """Maps known merchant brands directly to a category."""

    def __init__(
        self,
        groups: Tuple[Tuple[str, TransactionCategory, Tuple[str, ...]], ...] = BRAND_GROUPS,
        confidence: float = 0.9
    ):
        self.groups = groups
        self.confidence = confidence

    def match(self, folded_text: str) -> Optional[CategoryPrediction]:
        """Return the category of the first brand group with a hit."""
        for group_name, category, brands in self.groups:
            hits = matching_keywords(folded_text, brands)
            if hits:
                logger.debug("Brand match", extra={
                    'group': group_name,
                    'brand': hits[0],
                    'category': category.value,
                })
                return CategoryPrediction(category, self.confidence, SOURCE_BRAND)
        return None


class KeywordRuleMatcher:
    """Counts category vocabulary hits; always returns a prediction."""

    def __init__(self, rules: Dict[TransactionCategory, Tuple[str, ...]] = CATEGORY_KEYWORDS):
        self.rules = rules

    def match_counts(self, folded_text: str) -> Dict[TransactionCategory, int]:
        """Distinct keyword hits per category, omitting categories with none."""
        counts = {}
        for category, keywords in self.rules.items():
            hits = len(matching_keywords(folded_text, keywords))
            if hits:
                counts[category] = hits
        return counts

    def match(self, folded_text: str) -> CategoryPrediction:
        """
        Pick the category with the most distinct keyword hits.

        Confidence is hits / 3, capped at 1.0. Ties go to the category listed
        first in the rule table. Without any hit the default category is
        returned with confidence 0.3.
        """
        best_category, best_hits = None, 0
        for category, hits in self.match_counts(folded_text).items():
            if hits > best_hits:
                best_category, best_hits = category, hits

        if best_category is None:
            return CategoryPrediction(DEFAULT_CATEGORY, DEFAULT_CONFIDENCE, SOURCE_DEFAULT)

        confidence = min(best_hits / KEYWORDS_FOR_FULL_CONFIDENCE, 1.0)
        return CategoryPrediction(best_category, confidence, SOURCE_KEYWORD)


class UserHistoryMatcher:
    """Matches the receipt against the user's own labelled transactions."""

    def __init__(self, threshold: float = 0.7):
        self.threshold = threshold

    def match(
        self,
        folded_text: str,
        samples: Sequence[TrainingSample]
    ) -> Optional[CategoryPrediction]:
        """
        Accumulate similarity per category over close samples.

        Only samples with Jaccard similarity above the threshold contribute;
        the best category must also accumulate more than the threshold.
        Confidence is the accumulated score capped at 1.0.
        """
        if not samples:
            return None

        tokens = tokenize(folded_text)
        scores: Counter = Counter()
        for sample in samples:
            similarity = jaccard_similarity(tokens, sample.tokens or tokenize(sample.normalized_text))
            if similarity > self.threshold:
                scores[sample.category] += similarity

        if not scores:
            return None

        # most_common keeps first-seen order for equal totals
        category, score = scores.most_common(1)[0]
        if score <= self.threshold:
            return None

        logger.debug("History match", extra={
            'category': category.value,
            'score': score,
        })
        return CategoryPrediction(category, min(score, 1.0), SOURCE_HISTORY)


class SemanticSimilarityMatcher:
    """Compares the receipt's embedding with each category label's embedding."""

    def __init__(self, embedder: Embedder, threshold: float = 0.5):
        self.embedder = embedder
        self.threshold = threshold
        self.label_vectors: Dict[TransactionCategory, Sequence[float]] = {}
        for category in TransactionCategory:
            vector = self._embed(lower(category.label))
            if vector is not None:
                self.label_vectors[category] = vector

    def _embed(self, text: str) -> Optional[Sequence[float]]:
        try:
            return self.embedder.embed(text)
        except Exception:
            logger.warning("Embedding capability failed", exc_info=True)
            return None

    def match(self, text: str) -> Optional[CategoryPrediction]:
        """Return the closest category label if it is similar enough."""
        if not self.label_vectors:
            return None

        vector = self._embed(lower(text))
        if vector is None:
            return None

        best_category, best_similarity = None, None
        for category, label_vector in self.label_vectors.items():
            similarity = cosine_similarity(vector, label_vector)
            if best_similarity is None or similarity > best_similarity:
                best_category, best_similarity = category, similarity

        if best_category is None or best_similarity <= self.threshold:
            return None
        return CategoryPrediction(best_category, min(best_similarity, 1.0), SOURCE_SEMANTIC)


class CategoryClassifier:
    """
    Blends the matchers into one category suggestion.

    Constructed once and shared; holds only constant tables and the
    optional embedding capability.
    """

    def __init__(
        self,
        embedder: Optional[Embedder] = None,
        settings: Optional[Settings] = None
    ):
        self.settings = settings or default_settings
        self.brand_matcher = BrandMatcher(confidence=self.settings.BRAND_CONFIDENCE)
        self.keyword_matcher = KeywordRuleMatcher()
        self.history_matcher = UserHistoryMatcher(
            threshold=self.settings.HISTORY_SIMILARITY_THRESHOLD
        )
        self.semantic_matcher = None
        if embedder is not None:
            self.semantic_matcher = SemanticSimilarityMatcher(
                embedder, threshold=self.settings.SEMANTIC_SIMILARITY_THRESHOLD
            )

    def classify(
        self,
        text: str,
        merchant_name: Optional[str] = None,
        history: Iterable[HistoryEntry] = (),
        training_samples: Optional[Sequence[TrainingSample]] = None
    ) -> CategoryPrediction:
        """
        Suggest a standard category for receipt text.

        Args:
            text: Full receipt text
            merchant_name: Caller's merchant hint, prepended to text
            history: Caller's labelled transactions
            training_samples: Samples the caller already built (and cached)
                with build_training_samples; overrides history

        Returns:
            CategoryPrediction; never None
        """
        full_text = f"{merchant_name or ''} {text}"
        folded = fold(full_text)

        if training_samples is None:
            training_samples = build_training_samples(history)

        brand = self.brand_matcher.match(folded)
        user = self.history_matcher.match(folded, training_samples)
        keyword = self.keyword_matcher.match(folded)
        semantic = self.semantic_matcher.match(full_text.strip()) if self.semantic_matcher else None

        if brand is not None:
            chosen = brand
        elif user is not None:
            chosen = user
        elif semantic is not None and semantic.confidence > keyword.confidence:
            chosen = semantic
        else:
            chosen = keyword

        confidence = self._corroborated_confidence(chosen, [brand, user, keyword, semantic])
        result = CategoryPrediction(chosen.category, confidence, chosen.source)

        logger.debug("Classified receipt", extra={
            'category': result.category.value,
            'confidence': result.confidence,
            'source': result.source,
        })
        return result

    @staticmethod
    def _corroborated_confidence(
        chosen: CategoryPrediction,
        predictions: List[Optional[CategoryPrediction]]
    ) -> float:
        """Highest confidence among the real signals agreeing with the choice."""
        confidence = chosen.confidence
        for prediction in predictions:
            if prediction is None or prediction.source == SOURCE_DEFAULT:
                continue
            if prediction.category == chosen.category:
                confidence = max(confidence, prediction.confidence)
        return min(confidence, 1.0)
