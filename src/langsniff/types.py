"""Core immutable data structures used throughout langsniff."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

F = TypeVar("F", bound=Hashable)
C = TypeVar("C", bound=Hashable)


class ClassifierMode(str, Enum):
    """Operational role of a registered classifier."""

    ACTIVE = "active"
    SHADOW = "shadow"


class TokenKind(str, Enum):
    """Kinds produced by the scanning tokenizer."""

    COMMENT = "comment"
    STRING = "string"
    NUMBER = "number"
    IDENTIFIER = "identifier"
    KEYWORD = "keyword"
    OPERATOR = "operator"
    PUNCTUATION = "punctuation"
    UNKNOWN = "unknown"
    END = "end"


@dataclass(frozen=True)
class Token:
    """A scanned source fragment."""

    kind: TokenKind
    value: str


@dataclass(frozen=True)
class Classification(Generic[F, C]):
    """A feature set together with the category it was assigned.

    ``probability`` is 1.0 for learned observations and a normalised
    posterior for classifier output.
    """

    features: frozenset[F]
    category: C
    probability: float = 1.0


@dataclass(frozen=True)
class Prediction:
    """Text-level classification result."""

    category: str | None
    confidence: float
    scores: Mapping[str, float] = field(default_factory=dict)


__all__ = [
    "Classification",
    "ClassifierMode",
    "Prediction",
    "Token",
    "TokenKind",
]
