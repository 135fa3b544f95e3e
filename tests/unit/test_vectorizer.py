from __future__ import annotations

import math

import numpy as np
import pytest

from langsniff.classifiers.vectorizer import (
    NUMERIC_FEATURE_DIM,
    FeatureVectoriser,
    StreamingIdf,
)


def test_transform_shapes() -> None:
    vectoriser = FeatureVectoriser(text_features=64)

    encoded = vectoriser.transform("int x = 1;\nreturn x;")

    assert vectoriser.text_dimension == 64
    assert vectoriser.numeric_dimension == NUMERIC_FEATURE_DIM
    assert encoded.text.shape == (1, 64)
    assert encoded.numeric.shape == (1, NUMERIC_FEATURE_DIM)
    assert encoded.text.sum() == pytest.approx(6)


def test_hashing_is_case_sensitive_and_whitespace_based() -> None:
    vectoriser = FeatureVectoriser(text_features=2**12)

    upper = vectoriser.transform("Print")
    lower = vectoriser.transform("print")
    glued = vectoriser.transform("print(x)")

    assert upper.text.nnz == 1
    assert (upper.text != lower.text).nnz > 0
    assert glued.text.nnz == 1


def test_numeric_layout_features() -> None:
    text = "int main() {\n    return 0;\n}\n"

    numeric = FeatureVectoriser().transform(text).numeric.toarray()[0]

    assert numeric[0] == pytest.approx(math.log1p(3))
    assert numeric[2] == pytest.approx(1 / 3)
    assert numeric[3] == pytest.approx(2 / 3)
    assert numeric[4] == 0.0
    assert numeric[5] == pytest.approx(1 / 3)


def test_numeric_features_for_blank_text_are_zero() -> None:
    numeric = FeatureVectoriser().transform("  \n\n").numeric.toarray()[0]

    assert np.all(numeric == 0.0)


def test_idf_downweights_common_chunks() -> None:
    vectoriser = FeatureVectoriser(text_features=2**12)
    idf = StreamingIdf(vectoriser.text_dimension)
    for text in ("return x", "return y", "return z"):
        idf.observe(vectoriser.transform(text).text)

    weighted = idf.weigh(vectoriser.transform("return rare").text)

    values = dict(zip(weighted.indices, weighted.data))
    common_index = vectoriser.transform("return").text.indices[0]
    rare_index = vectoriser.transform("rare").text.indices[0]
    assert idf.samples_seen == 3
    assert values[common_index] < values[rare_index]
    assert float(weighted.data.dot(weighted.data)) == pytest.approx(1.0)


def test_repeated_chunks_are_dampened_before_observing() -> None:
    vectoriser = FeatureVectoriser(text_features=2**12)
    idf = StreamingIdf(vectoriser.text_dimension)
    counts = vectoriser.transform("a b b b")

    weighted = idf.weigh(counts.text)

    values = dict(zip(weighted.indices, weighted.data))
    a_index = vectoriser.transform("a").text.indices[0]
    b_index = vectoriser.transform("b").text.indices[0]
    assert values[b_index] / values[a_index] == pytest.approx(1.0 + math.log(3))
    assert float(weighted.data.dot(weighted.data)) == pytest.approx(1.0)
    assert counts.text.sum() == pytest.approx(4)


def test_empty_row_is_returned_unchanged() -> None:
    vectoriser = FeatureVectoriser(text_features=32)
    idf = StreamingIdf(32)

    assert idf.weigh(vectoriser.transform("").text).nnz == 0


def test_idf_rejects_wrong_width() -> None:
    idf = StreamingIdf(16)
    vector = FeatureVectoriser(text_features=32).transform("x").text

    with pytest.raises(ValueError):
        idf.observe(vector)
    with pytest.raises(ValueError):
        idf.weigh(vector)
