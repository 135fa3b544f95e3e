"""Classifier registry utilities."""

from __future__ import annotations

from typing import NamedTuple

from ..types import ClassifierMode, Prediction
from .base import Classifier


class RegisteredClassifier(NamedTuple):
    name: str
    classifier: Classifier
    mode: ClassifierMode


class ClassifierRegistry:
    """Named classifiers in registration order.

    At most one classifier is active and answers queries; the others run in
    shadow mode, trained on the same samples and reported for comparison.
    """

    def __init__(self) -> None:
        self._entries: dict[str, RegisteredClassifier] = {}
        self._active: str | None = None

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def register(self, classifier: Classifier, mode: ClassifierMode) -> None:
        name = classifier.name
        if name in self._entries:
            raise ValueError(f"Classifier '{name}' is already registered.")
        if mode is ClassifierMode.ACTIVE:
            if self._active is not None:
                raise ValueError(f"Classifier '{self._active}' is already active.")
            self._active = name
        self._entries[name] = RegisteredClassifier(name, classifier, mode)

    def get(self, name: str) -> Classifier:
        try:
            return self._entries[name].classifier
        except KeyError as exc:
            raise KeyError(f"Classifier '{name}' is not registered.") from exc

    def get_active(self) -> Classifier:
        if self._active is None:
            raise LookupError("No active classifier registered.")
        return self._entries[self._active].classifier

    def shadows(self) -> list[Classifier]:
        return [
            entry.classifier
            for entry in self._entries.values()
            if entry.mode is ClassifierMode.SHADOW
        ]

    def entries(self) -> list[RegisteredClassifier]:
        return list(self._entries.values())

    def train_all(self, text: str, label: str) -> dict[str, Exception]:
        """Train every classifier; return the failures keyed by classifier name."""

        failures: dict[str, Exception] = {}
        for name, entry in self._entries.items():
            try:
                entry.classifier.train(text, label)
            except Exception as exc:
                failures[name] = exc
        return failures

    def predict_all(self, text: str) -> dict[str, Prediction]:
        return {name: entry.classifier.predict(text) for name, entry in self._entries.items()}

    def modes(self) -> dict[str, ClassifierMode]:
        return {name: entry.mode for name, entry in self._entries.items()}


__all__ = ["ClassifierRegistry", "RegisteredClassifier"]
