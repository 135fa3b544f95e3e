"""Classifier protocol definitions."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..types import Prediction


@runtime_checkable
class Classifier(Protocol):
    """Common interface shared by all text-level language classifiers."""

    name: str

    def train(self, text: str, label: str) -> None:
        """Incrementally train the classifier with a single source sample."""

    def predict(self, text: str) -> Prediction:
        """Return the predicted language and score distribution."""

    def is_trained(self) -> bool:
        """Return True when the classifier has seen at least one sample."""

    def categories(self) -> list[str]:
        """Return the languages the classifier currently knows about."""


__all__ = ["Classifier"]
