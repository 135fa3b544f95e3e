"""Entry point guessing the language of a source snippet."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from concurrent.futures import Executor, Future, ThreadPoolExecutor

from .classifiers.base import Classifier
from .classifiers.match_tree import MatchTreeClassifier
from .classifiers.naive_bayes import NaiveBayesClassifier
from .classifiers.registry import ClassifierRegistry
from .classifiers.tfidf_sgd import TfidfSgdClassifier
from .config import DEFAULT_LANGUAGE, ClassifierConfig, Config
from .corpus import CorpusError, CorpusLoader
from .tokenizer import as_text
from .trainer import Trainer, TrainingResult
from .types import ClassifierMode, Prediction

LOGGER = logging.getLogger(__name__)


class AlreadyTrainedError(RuntimeError):
    """Raised when training is started a second time."""


class LanguageClassifier:
    """Owns a classifier registry, trains it once and answers ``classify``.

    ``DEFAULT_LANGUAGE`` ("js") is returned whenever no better answer exists:
    before training completes, when training produced nothing, or when the
    active classifier fails. JavaScript shares most keywords and punctuation
    with the C family, so a wrong default still highlights reasonably.

    Training is the only writer. Until it has finished ``classify`` never
    touches the classifiers, so concurrent callers can classify as soon as
    :attr:`is_trained` turns true.
    """

    def __init__(
        self,
        registry: ClassifierRegistry | None = None,
        *,
        loader: CorpusLoader | None = None,
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        if registry is None:
            registry = ClassifierRegistry()
            registry.register(NaiveBayesClassifier(), ClassifierMode.ACTIVE)
        self._registry = registry
        self._loader = loader or CorpusLoader()
        self.default_language = default_language
        self._lock = threading.Lock()
        self._started = False
        self._trained = threading.Event()
        self._finished = threading.Event()

    @classmethod
    def from_config(cls, config: Config) -> LanguageClassifier:
        loader = CorpusLoader(config.corpus_dir, chunk_lines=config.chunk_lines)
        languages: list[str] = []
        if "tfidf_sgd" in (config.classifiers.active, *config.classifiers.shadow):
            try:
                languages = loader.languages()
            except CorpusError as exc:
                LOGGER.warning("Cannot list corpus languages for tfidf_sgd: %s", exc)
        registry = build_registry(config.classifiers, languages)
        return cls(registry, loader=loader, default_language=config.default_language)

    @property
    def registry(self) -> ClassifierRegistry:
        return self._registry

    @property
    def loader(self) -> CorpusLoader:
        return self._loader

    @property
    def is_trained(self) -> bool:
        return self._trained.is_set()

    @property
    def languages(self) -> list[str]:
        if not self.is_trained:
            return []
        return self._registry.get_active().categories()

    def train(self) -> list[TrainingResult]:
        """Run the one-shot training pass synchronously."""

        self._claim_training()
        return self._run_training()

    def start_training(self, executor: Executor | None = None) -> Future[list[TrainingResult]]:
        """Run the training pass on a worker thread."""

        self._claim_training()
        if executor is not None:
            return executor.submit(self._run_training)
        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="langsniff-train")
        try:
            return pool.submit(self._run_training)
        finally:
            pool.shutdown(wait=False)

    def wait_until_trained(self, timeout: float | None = None) -> bool:
        """Block until a started training pass finishes; return :attr:`is_trained`."""

        self._finished.wait(timeout)
        return self.is_trained

    def classify(self, snippet: str | bytes | None) -> str:
        """Return the most likely language of ``snippet``; never raises.

        A blank snippet has no features, so once trained it goes to the
        language with the highest prior.
        """

        if not self.is_trained:
            return self.default_language
        try:
            prediction = self._registry.get_active().predict(as_text(snippet))
        except Exception:
            LOGGER.exception(
                "Classification failed; falling back to '%s'.", self.default_language
            )
            return self.default_language
        return prediction.category or self.default_language

    def classify_detailed(self, snippet: str | bytes | None) -> dict[str, Prediction]:
        """Return predictions from every registered classifier."""

        if not self.is_trained:
            return {}
        text = as_text(snippet)
        predictions: dict[str, Prediction] = {}
        for name, classifier, _mode in self._registry.entries():
            try:
                predictions[name] = classifier.predict(text)
            except Exception:
                LOGGER.exception("Classifier '%s' failed to predict.", name)
        return predictions

    def _claim_training(self) -> None:
        with self._lock:
            if self._started:
                raise AlreadyTrainedError(
                    "Language classifier training was already started; it runs once."
                )
            self._started = True

    def _run_training(self) -> list[TrainingResult]:
        try:
            results = Trainer(registry=self._registry, loader=self._loader).initial_training()
            if self._registry.get_active().is_trained():
                self._trained.set()
                LOGGER.info(
                    "Language classifier trained (%s); %s shadow classifier(s) alongside.",
                    ", ".join(self.languages),
                    len(self._registry.shadows()),
                )
            else:
                LOGGER.warning(
                    "Training produced no usable samples; classify() will return '%s'.",
                    self.default_language,
                )
            return results
        finally:
            self._finished.set()


def build_registry(config: ClassifierConfig, languages: Iterable[str] = ()) -> ClassifierRegistry:
    """Instantiate the configured active and shadow classifiers."""

    languages = list(languages)
    registry = ClassifierRegistry()
    registry.register(_build_classifier(config.active, config, languages), ClassifierMode.ACTIVE)
    for name in config.shadow:
        registry.register(_build_classifier(name, config, languages), ClassifierMode.SHADOW)
    return registry


def _build_classifier(name: str, config: ClassifierConfig, languages: list[str]) -> Classifier:
    if name == "naive_bayes":
        return NaiveBayesClassifier(
            memory_capacity=config.memory_capacity,
            weight=config.weight,
            assumed_probability=config.assumed_probability,
        )
    if name == "match_tree":
        return MatchTreeClassifier(depth=config.match_tree_depth)
    if name == "tfidf_sgd":
        return TfidfSgdClassifier(categories=languages)
    raise ValueError(f"Unknown classifier '{name}'")


__all__ = [
    "AlreadyTrainedError",
    "DEFAULT_LANGUAGE",
    "LanguageClassifier",
    "build_registry",
]
