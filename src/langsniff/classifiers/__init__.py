"""Classifier implementations and infrastructure."""

from .base import Classifier
from .bayes import BayesClassifier, UntrainedError
from .match_tree import MatchTree, MatchTreeClassifier
from .memory import FeatureMemory, InvalidConfigurationError
from .naive_bayes import NaiveBayesClassifier
from .registry import ClassifierRegistry, RegisteredClassifier
from .tfidf_sgd import TfidfSgdClassifier

__all__ = [
    "BayesClassifier",
    "Classifier",
    "ClassifierRegistry",
    "FeatureMemory",
    "InvalidConfigurationError",
    "MatchTree",
    "MatchTreeClassifier",
    "NaiveBayesClassifier",
    "RegisteredClassifier",
    "TfidfSgdClassifier",
    "UntrainedError",
]
