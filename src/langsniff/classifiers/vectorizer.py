"""Utilities for encoding source snippets into ML-friendly vectors."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from scipy import sparse
from sklearn.feature_extraction.text import HashingVectorizer

from ..tokenizer import whitespace_split

NUMERIC_FEATURE_DIM = 6
DEFAULT_TEXT_DIM = 2**14


@dataclass(frozen=True)
class EncodedFeatures:
    """Sparse matrices for text and layout features."""

    text: sparse.csr_matrix
    numeric: sparse.csr_matrix


class FeatureVectoriser:
    """Transforms a snippet into hashed chunk counts plus layout statistics."""

    def __init__(self, text_features: int = DEFAULT_TEXT_DIM) -> None:
        self._text_features = text_features
        self._vectorizer = HashingVectorizer(
            n_features=text_features,
            alternate_sign=False,
            norm=None,
            binary=False,
            lowercase=False,
            tokenizer=whitespace_split,
            token_pattern=None,
        )

    @property
    def text_dimension(self) -> int:
        return self._text_features

    @property
    def numeric_dimension(self) -> int:
        return NUMERIC_FEATURE_DIM

    def transform(self, text: str) -> EncodedFeatures:
        """Encode a snippet into sparse matrices."""

        text_matrix = self._vectorizer.transform([text])
        numeric_values = np.asarray([_numeric_features(text)], dtype=np.float64)
        numeric_matrix = sparse.csr_matrix(numeric_values)
        return EncodedFeatures(text=text_matrix, numeric=numeric_matrix)


class StreamingIdf:
    """Chunk document frequencies updated one training sample at a time.

    Raw counts are dampened to ``1 + log(count)`` before the IDF weight is
    applied, and every weighted row is L2-normalised.
    """

    def __init__(self, dimension: int) -> None:
        self.dimension = dimension
        self.samples_seen = 0
        self._document_frequency = np.zeros(dimension, dtype=np.float64)

    def idf(self, columns: np.ndarray) -> np.ndarray:
        seen = 1.0 + self.samples_seen
        return np.log(seen / (1.0 + self._document_frequency[columns])) + 1.0

    def weigh(self, counts: sparse.csr_matrix) -> sparse.csr_matrix:
        self._check_width(counts)
        weighted = counts.astype(np.float64)
        if weighted.nnz == 0:
            return weighted
        weighted.data = 1.0 + np.log(weighted.data)
        if self.samples_seen:
            weighted.data *= self.idf(weighted.indices)
        norm = float(np.linalg.norm(weighted.data))
        if norm > 0:
            weighted.data /= norm
        return weighted

    def observe(self, counts: sparse.csr_matrix) -> None:
        self._check_width(counts)
        self._document_frequency[np.unique(counts.indices)] += 1
        self.samples_seen += 1

    def _check_width(self, counts: sparse.csr_matrix) -> None:
        if counts.shape[1] != self.dimension:
            raise ValueError(f"expected {self.dimension} hashed columns, got {counts.shape[1]}")


def _numeric_features(text: str) -> list[float]:
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return [0.0] * NUMERIC_FEATURE_DIM
    count = len(lines)
    return [
        math.log1p(count),
        math.log1p(sum(len(line) for line in lines) / count),
        sum(line.rstrip().endswith(";") for line in lines) / count,
        sum(line.rstrip().endswith(("{", "}")) for line in lines) / count,
        sum(line.rstrip().endswith(":") for line in lines) / count,
        sum(line.startswith((" ", "\t")) for line in lines) / count,
    ]


__all__ = [
    "DEFAULT_TEXT_DIM",
    "EncodedFeatures",
    "FeatureVectoriser",
    "NUMERIC_FEATURE_DIM",
    "StreamingIdf",
]
