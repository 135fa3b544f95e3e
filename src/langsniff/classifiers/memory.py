"""Bounded learning window shared by the count-based classifiers."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from typing import Generic

from ..types import C, Classification, F

DEFAULT_MEMORY_CAPACITY = 1000


class InvalidConfigurationError(ValueError):
    """Raised when a classifier is configured with unusable parameters."""


class FeatureMemory(Generic[F, C]):
    """Feature and category counts over the last ``memory_capacity`` observations.

    Every ``learn`` call increments the counts and appends the observation to a
    FIFO queue. Once the queue grows past its capacity the oldest observation
    is forgotten by applying the exact inverse decrements, so the counts always
    describe the observations currently held in memory.

    Not thread-safe: concurrent ``learn`` calls, or ``learn`` concurrent with
    readers, need external synchronisation.
    """

    def __init__(self, memory_capacity: int = DEFAULT_MEMORY_CAPACITY) -> None:
        self._capacity = _validate_capacity(memory_capacity)
        self.feature_count_per_category: dict[C, dict[F, int]] = {}
        self.total_feature_count: dict[F, int] = {}
        self.total_category_count: dict[C, int] = {}
        self.memory: deque[Classification[F, C]] = deque()

    @property
    def memory_capacity(self) -> int:
        return self._capacity

    @memory_capacity.setter
    def memory_capacity(self, value: int) -> None:
        self.set_capacity(value)

    def set_capacity(self, capacity: int) -> None:
        """Change the capacity, forgetting the oldest observations if it shrinks."""

        self._capacity = _validate_capacity(capacity)
        while len(self.memory) > self._capacity:
            self._forget_oldest()

    @property
    def memory_size(self) -> int:
        return len(self.memory)

    @property
    def features(self) -> set[F]:
        return set(self.total_feature_count)

    @property
    def categories(self) -> set[C]:
        return set(self.total_category_count)

    @property
    def categories_total(self) -> int:
        return sum(self.total_category_count.values())

    def feature_count(self, feature: F, category: C) -> int:
        return self.feature_count_per_category.get(category, {}).get(feature, 0)

    def category_count(self, category: C) -> int:
        return self.total_category_count.get(category, 0)

    def increment_feature(self, feature: F, category: C) -> None:
        per_category = self.feature_count_per_category.setdefault(category, {})
        per_category[feature] = per_category.get(feature, 0) + 1
        self.total_feature_count[feature] = self.total_feature_count.get(feature, 0) + 1

    def increment_category(self, category: C) -> None:
        self.total_category_count[category] = self.total_category_count.get(category, 0) + 1

    def decrement_feature(self, feature: F, category: C) -> None:
        per_category = self.feature_count_per_category.get(category)
        if per_category is None or feature not in per_category:
            return
        _decrement(per_category, feature)
        if not per_category:
            # the category itself stays counted in total_category_count
            del self.feature_count_per_category[category]
        _decrement(self.total_feature_count, feature)

    def decrement_category(self, category: C) -> None:
        if category in self.total_category_count:
            _decrement(self.total_category_count, category)

    def learn(self, category: C, features: Iterable[F]) -> None:
        """Record that ``features`` were observed for ``category``."""

        self.learn_classification(Classification(frozenset(features), category))

    def learn_classification(self, classification: Classification[F, C]) -> None:
        for feature in classification.features:
            self.increment_feature(feature, classification.category)
        self.increment_category(classification.category)

        self.memory.append(classification)
        if len(self.memory) > self._capacity:
            self._forget_oldest()

    def check_invariants(self) -> None:
        """Assert count conservation and bounded memory (debugging aid)."""

        assert len(self.memory) <= self._capacity
        summed: dict[F, int] = {}
        for per_category in self.feature_count_per_category.values():
            for feature, count in per_category.items():
                assert count > 0
                summed[feature] = summed.get(feature, 0) + count
        assert summed == self.total_feature_count
        assert all(count > 0 for count in self.total_category_count.values())

    def _forget_oldest(self) -> None:
        forgotten = self.memory.popleft()
        for feature in forgotten.features:
            self.decrement_feature(feature, forgotten.category)
        self.decrement_category(forgotten.category)


def _decrement(counts: dict, key) -> None:
    remaining = counts[key] - 1
    if remaining <= 0:
        del counts[key]
    else:
        counts[key] = remaining


def _validate_capacity(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigurationError(f"memory capacity must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidConfigurationError(f"memory capacity must be positive, got {value}")
    return value


__all__ = ["DEFAULT_MEMORY_CAPACITY", "FeatureMemory", "InvalidConfigurationError"]
