"""Text adapter around :class:`BayesClassifier` used for active classification."""

from __future__ import annotations

from collections.abc import Callable

from ..tokenizer import whitespace_split
from ..types import Prediction
from .bayes import DEFAULT_ASSUMED_PROBABILITY, DEFAULT_WEIGHT, BayesClassifier
from .memory import DEFAULT_MEMORY_CAPACITY

FeatureExtractor = Callable[[str], list[str]]


class NaiveBayesClassifier:
    """Bag-of-words Naive Bayes over whitespace-delimited chunks.

    Training and prediction share ``feature_extractor``; changing it between
    the two would make the learned counts meaningless.
    """

    def __init__(
        self,
        name: str = "naive_bayes",
        *,
        memory_capacity: int = DEFAULT_MEMORY_CAPACITY,
        weight: float = DEFAULT_WEIGHT,
        assumed_probability: float = DEFAULT_ASSUMED_PROBABILITY,
        feature_extractor: FeatureExtractor = whitespace_split,
    ) -> None:
        self.name = name
        self._extract = feature_extractor
        self._model: BayesClassifier[str, str] = BayesClassifier(
            memory_capacity,
            weight=weight,
            assumed_probability=assumed_probability,
        )

    @property
    def model(self) -> BayesClassifier[str, str]:
        return self._model

    def train(self, text: str, label: str) -> None:
        self._model.learn(_normalize_label(label), self._extract(text))

    def predict(self, text: str) -> Prediction:
        ranked = self._model.classify_detailed(self._extract(text))
        if not ranked:
            return Prediction(category=None, confidence=0.0, scores={})

        best = ranked[-1]
        scores = {item.category: item.probability for item in ranked}
        return Prediction(category=best.category, confidence=best.probability, scores=scores)

    def is_trained(self) -> bool:
        return bool(self._model.categories)

    def categories(self) -> list[str]:
        return sorted(self._model.categories)


def _normalize_label(label: str) -> str:
    normalized = str(label).strip()
    if not normalized:
        raise ValueError("label cannot be empty")
    return normalized


__all__ = ["NaiveBayesClassifier"]
