from __future__ import annotations

import os
import subprocess
import sys

import pytest

from langsniff.classifiers.bayes import BayesClassifier, UntrainedError
from langsniff.classifiers.memory import InvalidConfigurationError


def _two_language_classifier() -> BayesClassifier[str, str]:
    classifier: BayesClassifier[str, str] = BayesClassifier()
    classifier.learn("pythonish", {"def", "self", "import"})
    classifier.learn("cish", {"int", "struct", "void"})
    return classifier


def test_classifies_by_known_features() -> None:
    classifier = _two_language_classifier()

    assert classifier.classify({"def", "self"}).category == "pythonish"
    assert classifier.classify({"void", "int"}).category == "cish"


def test_unseen_features_tie_break_deterministically() -> None:
    winners = set()
    for order in (("pythonish", "cish"), ("cish", "pythonish")):
        classifier: BayesClassifier[str, str] = BayesClassifier()
        for category in order:
            features = {"def"} if category == "pythonish" else {"int"}
            classifier.learn(category, features)
        winners.add(classifier.classify({"banana"}).category)

    assert winners == {"pythonish"}


def test_identical_training_yields_equal_scores_and_stable_winner() -> None:
    classifier: BayesClassifier[str, str] = BayesClassifier()
    classifier.learn("alpha", {"f", "g"})
    classifier.learn("beta", {"f", "g"})

    assert classifier.category_probability({"f"}, "alpha") == classifier.category_probability(
        {"f"}, "beta"
    )
    ranked = classifier.classify_detailed({"f"})
    assert ranked[0].probability == ranked[1].probability
    assert [item.category for item in ranked] == ["alpha", "beta"]
    assert all(classifier.classify({"f"}).category == "beta" for _ in range(5))


def _mirrored_classifier() -> BayesClassifier[str, str]:
    classifier: BayesClassifier[str, str] = BayesClassifier()
    classifier.learn("alpha", {"kw_x"})
    classifier.learn("beta", {"kw_y"})
    return classifier


MIRRORED_SCRIPT = """
from langsniff.classifiers.bayes import BayesClassifier

classifier = BayesClassifier()
classifier.learn("alpha", {"kw_x"})
classifier.learn("beta", {"kw_y"})
print(classifier.classify({"kw_x", "kw_y"}).category)
"""


def test_mirrored_scores_are_bit_identical() -> None:
    classifier = _mirrored_classifier()
    features = {"kw_x", "kw_y"}

    alpha = classifier.log_category_probability(features, "alpha")
    beta = classifier.log_category_probability(features, "beta")

    assert alpha == beta
    assert classifier.classify(features).category == "beta"


def test_mirrored_tie_winner_ignores_hash_seed() -> None:
    winners = set()
    for seed in range(8):
        env = {**os.environ, "PYTHONHASHSEED": str(seed)}
        completed = subprocess.run(
            [sys.executable, "-c", MIRRORED_SCRIPT],
            capture_output=True,
            text=True,
            env=env,
            check=True,
        )
        winners.add(completed.stdout.strip())

    assert winners == {"beta"}


def test_classify_untrained_raises() -> None:
    classifier: BayesClassifier[str, str] = BayesClassifier()

    assert classifier.classify_detailed({"x"}) == []
    with pytest.raises(UntrainedError):
        classifier.classify({"x"})


def test_classify_detailed_is_ascending_and_normalised() -> None:
    classifier = _two_language_classifier()
    classifier.learn("rubyish", {"def", "end"})

    ranked = classifier.classify_detailed({"def", "self"})

    probabilities = [item.probability for item in ranked]
    assert probabilities == sorted(probabilities)
    assert sum(probabilities) == pytest.approx(1.0)
    assert ranked[-1].category == "pythonish"
    assert all(item.features == frozenset({"def", "self"}) for item in ranked)


def test_feature_probability() -> None:
    classifier: BayesClassifier[str, str] = BayesClassifier()
    classifier.learn("py", {"def"})
    classifier.learn("py", {"self"})

    assert classifier.feature_probability("def", "py") == pytest.approx(0.5)
    assert classifier.feature_probability("def", "unknown") == 0.0
    assert classifier.feature_probability("missing", "py") == 0.0


def test_feature_weighed_average_formula() -> None:
    classifier: BayesClassifier[str, str] = BayesClassifier()
    classifier.learn("py", {"def"})
    classifier.learn("rb", {"def"})
    classifier.learn("py", {"self"})

    # totals=2, basic=P(def|py)=1/2
    expected = (1.0 * 0.5 + 2 * 0.5) / (1.0 + 2)
    assert classifier.feature_weighed_average("def", "py") == pytest.approx(expected)
    assert classifier.feature_weighed_average("unseen", "py") == pytest.approx(0.5)
    assert classifier.feature_weighed_average(
        "def", "rb", weight=3.0, assumed_probability=0.2
    ) == pytest.approx((3.0 * 0.2 + 2 * 1.0) / (3.0 + 2))


def test_feature_weighed_average_with_custom_calculator() -> None:
    classifier: BayesClassifier[str, str] = BayesClassifier()
    classifier.learn("py", {"def"})

    value = classifier.feature_weighed_average("def", "py", calculator=lambda _f, _c: 0.0)

    assert value == pytest.approx(0.25)


def test_category_probability_matches_naive_bayes_product() -> None:
    classifier = _two_language_classifier()

    expected = 0.5 * 0.75 * 0.75
    assert classifier.category_probability({"def", "self"}, "pythonish") == pytest.approx(expected)
    assert classifier.category_probability({"def"}, "unknown") == 0.0


def test_log_domain_ranks_when_plain_product_underflows() -> None:
    classifier: BayesClassifier[str, str] = BayesClassifier(memory_capacity=10)
    classifier.learn("a", {f"a{idx}" for idx in range(3000)})
    classifier.learn("b", {f"b{idx}" for idx in range(3000)})
    query = {f"a{idx}" for idx in range(3000)}

    assert classifier.category_probability(query, "a") == 0.0
    assert classifier.category_probability(query, "b") == 0.0
    assert classifier.classify(query).category == "a"


def test_category_probability_increases_until_eviction() -> None:
    capacity = 3
    classifier: BayesClassifier[str, str] = BayesClassifier(memory_capacity=capacity)
    features = {"f1", "f2"}
    scores = []

    for _ in range(capacity + 1):
        classifier.learn("a", features)
        scores.append(classifier.category_probability(features, "a"))

    assert scores[0] < scores[1] < scores[capacity - 1]
    assert scores[capacity] == pytest.approx(scores[capacity - 1])
    assert classifier.memory_size == capacity


@pytest.mark.parametrize(
    "kwargs",
    [
        {"weight": 0.0},
        {"weight": -1.0},
        {"assumed_probability": 0.0},
        {"assumed_probability": 1.5},
        {"memory_capacity": 0},
    ],
)
def test_invalid_parameters_are_rejected(kwargs) -> None:
    with pytest.raises(InvalidConfigurationError):
        BayesClassifier(**kwargs)
