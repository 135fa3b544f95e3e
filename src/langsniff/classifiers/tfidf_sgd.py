"""TF-IDF + SGD classifier used for shadow evaluation."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
from scipy import sparse
from sklearn.linear_model import SGDClassifier

from ..types import Prediction
from .vectorizer import DEFAULT_TEXT_DIM, FeatureVectoriser, StreamingIdf


class TfidfSgdClassifier:
    """Linear classifier trained with SGD on hashed TF-IDF chunk features.

    ``partial_fit`` needs the full label set up front, so the languages must
    be known when the classifier is built.
    """

    def __init__(
        self,
        name: str = "tfidf_sgd",
        *,
        categories: Iterable[str],
        alpha: float = 1e-4,
        text_features: int = DEFAULT_TEXT_DIM,
        random_state: int = 42,
    ) -> None:
        self.name = name
        self._vectoriser = FeatureVectoriser(text_features=text_features)
        self._idf = StreamingIdf(self._vectoriser.text_dimension)
        self._model = SGDClassifier(
            loss="log_loss",
            penalty="l2",
            alpha=alpha,
            learning_rate="optimal",
            random_state=random_state,
        )
        self._trained = False
        self._classes = np.array(_normalize_categories(categories), dtype=object)

    def train(self, text: str, label: str) -> None:
        target_label = _normalize_label(label)
        if target_label not in self._classes:
            raise ValueError(f"Unknown language '{target_label}' for classifier '{self.name}'")
        matrix = self._matrix(text)
        target = np.array([target_label], dtype=object)
        if not self._trained:
            self._model.partial_fit(matrix, target, classes=self._classes)
            self._trained = True
        else:
            self._model.partial_fit(matrix, target)
        self._idf.observe(self._vectoriser.transform(text).text)

    def predict(self, text: str) -> Prediction:
        if not self._trained:
            return Prediction(category=None, confidence=0.0, scores={})

        probabilities = self._model.predict_proba(self._matrix(text))[0]
        scores = {
            str(label): float(probabilities[idx]) for idx, label in enumerate(self._model.classes_)
        }
        category = max(scores, key=lambda language: (scores[language], language))
        return Prediction(category=category, confidence=scores[category], scores=scores)

    def is_trained(self) -> bool:
        return self._trained

    def categories(self) -> list[str]:
        return sorted(str(value) for value in self._classes)

    def _matrix(self, text: str) -> sparse.csr_matrix:
        encoded = self._vectoriser.transform(text)
        tfidf_text = self._idf.weigh(encoded.text)
        return sparse.hstack([tfidf_text, encoded.numeric], format="csr")


def _normalize_categories(categories: Iterable[str]) -> tuple[str, ...]:
    normalized: list[str] = []
    seen: set[str] = set()
    for value in categories:
        candidate = str(value).strip()
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        normalized.append(candidate)
    if len(normalized) < 2:
        raise ValueError("tfidf_sgd needs at least two languages to train")
    return tuple(sorted(normalized))


def _normalize_label(label: str) -> str:
    normalized = str(label).strip()
    if not normalized:
        raise ValueError("label cannot be empty")
    return normalized


__all__ = ["TfidfSgdClassifier"]
