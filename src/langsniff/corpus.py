"""Discovery and reading of the per-language training corpus."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

LOGGER = logging.getLogger(__name__)

BUNDLED_CORPUS_DIRNAME = "training_set"


class CorpusError(RuntimeError):
    """Raised when the training corpus cannot be listed or read."""


@dataclass(frozen=True)
class CorpusGroup:
    """All example files bundled for one language."""

    language: str
    sources: tuple[Traversable, ...]


@dataclass(frozen=True)
class TrainingSample:
    """A chunk of example source text labelled with its language."""

    language: str
    text: str
    source: str


class CorpusLoader:
    """Enumerates training files grouped by language.

    A subdirectory of ``root`` is a group named after the directory; a file
    sitting directly in ``root`` is a group named after its stem. Hidden
    entries are ignored. Without an explicit ``root`` the corpus bundled with
    the package is used.
    """

    def __init__(
        self,
        root: Path | str | Traversable | None = None,
        *,
        chunk_lines: int | None = None,
    ) -> None:
        if chunk_lines is not None and chunk_lines <= 0:
            raise ValueError(f"chunk_lines must be positive, got {chunk_lines}")
        if root is None:
            self._root: Traversable = resources.files("langsniff") / BUNDLED_CORPUS_DIRNAME
        elif isinstance(root, str):
            self._root = Path(root).expanduser()
        else:
            self._root = root
        self._chunk_lines = chunk_lines

    @property
    def root(self) -> Traversable:
        return self._root

    @property
    def chunk_lines(self) -> int | None:
        return self._chunk_lines

    def groups(self) -> list[CorpusGroup]:
        """Return the language groups found under the corpus root, sorted by name."""

        if not self._root.is_dir():
            raise CorpusError(f"Training corpus not found: {self._root}")
        try:
            entries = sorted(self._root.iterdir(), key=lambda entry: entry.name)
        except OSError as exc:
            raise CorpusError(f"Cannot list training corpus {self._root}: {exc}") from exc

        grouped: dict[str, list[Traversable]] = {}
        for entry in entries:
            if _is_hidden(entry):
                continue
            if entry.is_dir():
                files = sorted(
                    (
                        child
                        for child in entry.iterdir()
                        if child.is_file() and not _is_hidden(child)
                    ),
                    key=lambda child: child.name,
                )
                if not files:
                    LOGGER.debug("Skipping empty corpus group %s", entry.name)
                    continue
                grouped.setdefault(entry.name, []).extend(files)
            elif entry.is_file():
                grouped.setdefault(_stem(entry.name), []).append(entry)
        return [
            CorpusGroup(language=language, sources=tuple(sources))
            for language, sources in sorted(grouped.items())
        ]

    def languages(self) -> list[str]:
        return [group.language for group in self.groups()]

    def read(self, source: Traversable) -> str:
        try:
            payload = source.read_bytes()
        except OSError as exc:
            raise CorpusError(f"Cannot read training file {source}: {exc}") from exc
        return payload.decode("utf-8", errors="replace")

    def read_samples(self, language: str, source: Traversable) -> list[TrainingSample]:
        """Read one training file and split it into samples."""

        text = self.read(source)
        label = f"{language}/{source.name}"
        if self._chunk_lines is None:
            return [TrainingSample(language=language, text=text, source=label)]

        lines = text.splitlines(keepends=True)
        samples: list[TrainingSample] = []
        for start in range(0, len(lines), self._chunk_lines):
            chunk = "".join(lines[start : start + self._chunk_lines])
            samples.append(
                TrainingSample(
                    language=language,
                    text=chunk,
                    source=f"{label}:{start + 1}",
                )
            )
        return samples

    def samples(self) -> Iterator[TrainingSample]:
        for group in self.groups():
            for source in group.sources:
                yield from self.read_samples(group.language, source)

    def contents(self) -> dict[str, list[str]]:
        """Return raw file contents keyed by language."""

        return {
            group.language: [self.read(source) for source in group.sources]
            for group in self.groups()
        }


def _is_hidden(entry: Traversable) -> bool:
    return entry.name.startswith((".", "_"))


def _stem(name: str) -> str:
    stem, _dot, _suffix = name.partition(".")
    return stem or name


__all__ = [
    "BUNDLED_CORPUS_DIRNAME",
    "CorpusError",
    "CorpusGroup",
    "CorpusLoader",
    "TrainingSample",
]
