from __future__ import annotations

import threading
from pathlib import Path

import pytest
from typer.testing import CliRunner

from langsniff.cli import app
from langsniff.config import ClassifierConfig, Config
from langsniff.corpus import CorpusLoader
from langsniff.language import LanguageClassifier

BUNDLED_LANGUAGES = ["c", "csharp", "go", "java", "js", "python", "ruby"]

runner = CliRunner()


def _excerpt(text: str, lines: int = 15) -> str:
    kept = [line for line in text.splitlines() if line.strip()]
    return "\n".join(kept[:lines])


def test_bundled_corpus_languages(trained_classifier: LanguageClassifier) -> None:
    assert trained_classifier.is_trained is True
    assert trained_classifier.languages == BUNDLED_LANGUAGES


@pytest.mark.parametrize("language", BUNDLED_LANGUAGES)
def test_corpus_excerpts_classify_as_their_language(
    language: str, bundled_loader: CorpusLoader, trained_classifier: LanguageClassifier
) -> None:
    source_text = bundled_loader.contents()[language][0]

    assert trained_classifier.classify(_excerpt(source_text)) == language


@pytest.mark.parametrize(
    ("snippet", "language"),
    [
        ("defer s.mu.RUnlock()\nreturn note, nil", "go"),
        ("item = self.items.setdefault(name, Item(name))", "python"),
        ("def balance\n  @entries.sum(&:amount)\nend", "ruby"),
        ("typedef struct {\n\tconst char *pidfile;\n\tint64_t last_restart_at;", "c"),
        ("using System.Collections.Generic;", "csharp"),
    ],
)
def test_distinctive_lines(
    snippet: str, language: str, trained_classifier: LanguageClassifier
) -> None:
    assert trained_classifier.classify(snippet) == language


def test_classifiers_agree_on_known_languages() -> None:
    config = Config(classifiers=ClassifierConfig(shadow=("match_tree", "tfidf_sgd")))
    classifier = LanguageClassifier.from_config(config)
    classifier.train()

    detailed = classifier.classify_detailed("func (s *Store) Get(id int) (Note, error) {")

    assert set(detailed) == {"naive_bayes", "match_tree", "tfidf_sgd"}
    for prediction in detailed.values():
        assert prediction.category in BUNDLED_LANGUAGES
        assert sum(prediction.scores.values()) == pytest.approx(1.0)


def test_concurrent_readers_during_background_training() -> None:
    classifier = LanguageClassifier()
    snippet = "const cart = new Cart('guest');\nmodule.exports = { Cart, checkout, formatPrice, legacy };"
    answers: list[str] = []
    lock = threading.Lock()

    def reader() -> None:
        for _ in range(20):
            answer = classifier.classify(snippet)
            with lock:
                answers.append(answer)

    future = classifier.start_training()
    threads = [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    assert classifier.wait_until_trained(timeout=60) is True
    future.result(timeout=60)
    assert set(answers) <= set(BUNDLED_LANGUAGES)
    assert classifier.classify(snippet) == "js"


def test_cli_classifies_with_default_configuration(isolated_home: Path) -> None:
    result = runner.invoke(
        app, ["classify"], input="def add(self, name, quantity=1):\n    return quantity\n"
    )

    assert result.exit_code == 0
    assert result.stdout.strip().splitlines()[-1] == "python"


def test_cli_status_uses_bundled_corpus(isolated_home: Path) -> None:
    result = runner.invoke(app, ["status"])

    assert result.exit_code == 0
    assert "training_set" in result.stdout
    assert "Active classifier: naive_bayes" in result.stdout
