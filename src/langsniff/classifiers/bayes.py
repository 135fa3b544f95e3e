"""Incremental Naive Bayes classifier over arbitrary hashable features."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable

import numpy as np

from ..types import C, Classification, F
from .memory import DEFAULT_MEMORY_CAPACITY, FeatureMemory, InvalidConfigurationError

DEFAULT_WEIGHT = 1.0
DEFAULT_ASSUMED_PROBABILITY = 0.5

FeatureProbability = Callable[[F, C], float]


class UntrainedError(LookupError):
    """Raised when classification is requested before any category is known."""


class BayesClassifier(FeatureMemory[F, C]):
    """Naive Bayes: ``argmax P(cat) * PROD(P(feat_i | cat))``.

    Feature probabilities are smoothed with a weighted average towards
    ``assumed_probability`` so features seen only a handful of times do not
    dominate. Ranking happens in log domain to avoid underflow on long
    snippets; ``category_probability`` keeps the plain product for callers who
    want the raw quantity.
    """

    def __init__(
        self,
        memory_capacity: int = DEFAULT_MEMORY_CAPACITY,
        *,
        weight: float = DEFAULT_WEIGHT,
        assumed_probability: float = DEFAULT_ASSUMED_PROBABILITY,
    ) -> None:
        super().__init__(memory_capacity)
        if not weight > 0:
            raise InvalidConfigurationError(f"weight must be positive, got {weight}")
        if not 0 < assumed_probability <= 1:
            raise InvalidConfigurationError(
                f"assumed probability must be in (0, 1], got {assumed_probability}"
            )
        self.weight = float(weight)
        self.assumed_probability = float(assumed_probability)

    def feature_probability(self, feature: F, category: C) -> float:
        """Return ``P(feature | category)`` from raw counts (0 for unknown categories)."""

        count = self.category_count(category)
        if count == 0:
            return 0.0
        return self.feature_count(feature, category) / count

    def feature_weighed_average(
        self,
        feature: F,
        category: C,
        *,
        weight: float | None = None,
        assumed_probability: float | None = None,
        calculator: FeatureProbability | None = None,
    ) -> float:
        """Smoothed ``P(feature | category)``.

        ``calculator`` replaces :meth:`feature_probability` as the source of
        the basic probability.
        """

        weight = self.weight if weight is None else weight
        assumed = self.assumed_probability if assumed_probability is None else assumed_probability
        basic = (calculator or self.feature_probability)(feature, category)
        totals = self.total_feature_count.get(feature, 0)
        denominator = weight + totals
        if denominator == 0:
            return assumed
        return (weight * assumed + totals * basic) / denominator

    def category_probability(self, features: Iterable[F], category: C) -> float:
        total = self.categories_total
        if total == 0:
            return 0.0
        probability = self.category_count(category) / total
        for feature in frozenset(features):
            probability *= self.feature_weighed_average(feature, category)
        return probability

    def log_category_probability(self, features: Iterable[F], category: C) -> float:
        count = self.category_count(category)
        if count == 0:
            return -math.inf
        # fsum is exactly rounded, so the score does not depend on set iteration order.
        return math.fsum(
            [
                math.log(count),
                -math.log(self.categories_total),
                *(
                    _safe_log(self.feature_weighed_average(feature, category))
                    for feature in frozenset(features)
                ),
            ]
        )

    def classify_detailed(self, features: Iterable[F]) -> list[Classification[F, C]]:
        """Return one classification per known category, least likely first.

        Probabilities are normalised posteriors. Equal scores are ordered by
        ``str(category)``, so the tie winner is stable across runs.
        """

        feature_set = frozenset(features)
        categories = list(self.total_category_count)
        if not categories:
            return []
        log_scores = np.array(
            [self.log_category_probability(feature_set, category) for category in categories],
            dtype=np.float64,
        )
        probabilities = _softmax(log_scores)
        order = sorted(
            range(len(categories)),
            key=lambda idx: (log_scores[idx], str(categories[idx])),
        )
        return [
            Classification(feature_set, categories[idx], float(probabilities[idx]))
            for idx in order
        ]

    def classify(self, features: Iterable[F]) -> Classification[F, C]:
        ranked = self.classify_detailed(features)
        if not ranked:
            raise UntrainedError("classifier has not learned any category yet")
        return ranked[-1]


def _safe_log(value: float) -> float:
    if value <= 0:
        return -math.inf
    return math.log(value)


def _softmax(log_scores: np.ndarray) -> np.ndarray:
    finite = np.isfinite(log_scores)
    if not finite.any():
        return np.full(log_scores.shape, 1.0 / log_scores.size)
    shifted = np.exp(log_scores - log_scores[finite].max())
    return shifted / shifted.sum()


__all__ = [
    "BayesClassifier",
    "DEFAULT_ASSUMED_PROBABILITY",
    "DEFAULT_WEIGHT",
    "UntrainedError",
]
