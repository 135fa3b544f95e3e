"""One-shot training pass over the bundled example corpus."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from importlib.resources.abc import Traversable

from .classifiers.registry import ClassifierRegistry
from .corpus import CorpusError, CorpusLoader, TrainingSample
from .types import ClassifierMode

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrainingResult:
    """Represents the outcome of training on one corpus sample."""

    status: str
    language: str
    source: str
    reason: str | None = None


class Trainer:
    """Feeds every corpus sample to all registered classifiers."""

    def __init__(self, *, registry: ClassifierRegistry, loader: CorpusLoader) -> None:
        self._registry = registry
        self._loader = loader

    def initial_training(self, languages: Iterable[str] | None = None) -> list[TrainingResult]:
        """Train on the corpus, optionally restricted to ``languages``."""

        try:
            groups = self._loader.groups()
        except CorpusError as exc:
            LOGGER.error("Failed to enumerate training corpus: %s", exc)
            return []

        wanted = set(languages) if languages is not None else None
        results: list[TrainingResult] = []
        for group in groups:
            if wanted is not None and group.language not in wanted:
                continue
            for source in group.sources:
                results.extend(self.train_source(group.language, source))

        trained = [result for result in results if result.status == "trained"]
        LOGGER.info(
            "Trained on %s sample(s) across %s language(s); %s skipped or failed.",
            len(trained),
            len({result.language for result in trained}),
            len(results) - len(trained),
        )
        return results

    def train_source(self, language: str, source: Traversable) -> list[TrainingResult]:
        try:
            samples = self._loader.read_samples(language, source)
        except CorpusError as exc:
            LOGGER.error("Failed to read training file for '%s': %s", language, exc)
            return [
                TrainingResult(
                    status="read_error",
                    language=language,
                    source=f"{language}/{source.name}",
                    reason=str(exc),
                )
            ]
        return [self.train_sample(sample) for sample in samples]

    def train_sample(self, sample: TrainingSample) -> TrainingResult:
        if not sample.text.strip():
            LOGGER.debug("Skipping empty training sample %s", sample.source)
            return TrainingResult(
                status="empty_sample",
                language=sample.language,
                source=sample.source,
                reason="no_features",
            )

        failures = self._registry.train_all(sample.text, sample.language)
        for name, exc in failures.items():
            LOGGER.error(
                "Classifier '%s' training failed for sample %s",
                name,
                sample.source,
                exc_info=exc,
            )

        modes = self._registry.modes()
        if any(modes[name] is ClassifierMode.ACTIVE for name in failures):
            return TrainingResult(
                status="training_error",
                language=sample.language,
                source=sample.source,
                reason=f"classifier_training_failed: {', '.join(failures)}",
            )

        LOGGER.debug("Trained '%s' on %s", sample.language, sample.source)
        return TrainingResult(
            status="trained",
            language=sample.language,
            source=sample.source,
            reason=f"shadow_training_failed: {', '.join(failures)}" if failures else None,
        )


__all__ = ["Trainer", "TrainingResult"]
