from __future__ import annotations

from pathlib import Path

import pytest

from langsniff.corpus import CorpusLoader
from langsniff.language import LanguageClassifier


@pytest.fixture(scope="module")
def bundled_loader() -> CorpusLoader:
    return CorpusLoader()


@pytest.fixture(scope="module")
def trained_classifier(bundled_loader: CorpusLoader) -> LanguageClassifier:
    classifier = LanguageClassifier(loader=bundled_loader)
    classifier.train()
    return classifier


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the default config location at an empty home directory."""

    monkeypatch.delenv("LANGSNIFF_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path
