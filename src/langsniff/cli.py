"""langsniff command-line interface."""

from __future__ import annotations

import logging
import sys
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from . import __version__
from .config import Config, ConfigError, load_config, resolve_config_path
from .corpus import CorpusError, CorpusLoader
from .language import LanguageClassifier
from .logging import configure_logging

app = typer.Typer(help="Guess the programming language of source snippets.")
LOGGER = logging.getLogger(__name__)


@dataclass
class CLIState:
    """Stores shared CLI options."""

    config_path: Path | None


@app.callback()
def _langsniff(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "-c",
            "--config",
            help="Path to config (env LANGSNIFF_CONFIG or ~/.config/langsniff/config.yaml).",
        ),
    ] = None,
) -> None:
    """Capture global CLI options."""

    resolved = config.expanduser() if config else None
    ctx.obj = CLIState(config_path=resolved)


@app.command()
def classify(
    ctx: typer.Context,
    source: Annotated[
        Path | None,
        typer.Argument(help="File containing the snippet (reads stdin when omitted or '-')."),
    ] = None,
    detailed: Annotated[
        bool,
        typer.Option("--detailed", help="Show the score distribution of every classifier."),
    ] = False,
) -> None:
    """Print the most likely language of a snippet."""

    config = _load_environment(_state(ctx))
    snippet = _read_snippet(source)
    classifier = _trained_classifier(config)

    language = classifier.classify(snippet)
    if not detailed:
        typer.echo(language)
        return

    typer.echo(f"Language: {language}")
    modes = classifier.registry.modes()
    for name, prediction in classifier.classify_detailed(snippet).items():
        typer.echo(f"{name} ({modes[name].value}): {prediction.category or '-'}")
        ranked = sorted(prediction.scores.items(), key=lambda item: (-item[1], item[0]))
        for category, score in ranked:
            typer.echo(f"  {category}: {score:.4f}")


@app.command()
def train(ctx: typer.Context) -> None:
    """Run the training pass and report per-sample results."""

    config = _load_environment(_state(ctx))
    classifier = _build_classifier(config)
    results = classifier.train()

    for result in results:
        line = f"{result.status:<15} {result.source}"
        if result.reason:
            line += f" ({result.reason})"
        typer.echo(line)

    trained = Counter(result.language for result in results if result.status == "trained")
    typer.echo(
        f"Trained {sum(trained.values())} sample(s) across {len(trained)} language(s)."
    )
    if not classifier.is_trained:
        typer.secho("Classifier is not trained.", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


@app.command()
def languages(ctx: typer.Context) -> None:
    """List the languages present in the training corpus."""

    config = _load_environment(_state(ctx))
    loader = CorpusLoader(config.corpus_dir, chunk_lines=config.chunk_lines)
    try:
        groups = loader.groups()
    except CorpusError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc
    for group in groups:
        typer.echo(f"{group.language} ({len(group.sources)} file(s))")


@app.command()
def status(ctx: typer.Context) -> None:
    """Display configuration in effect."""

    state = _state(ctx)
    config = _load_environment(state)
    loader = CorpusLoader(config.corpus_dir, chunk_lines=config.chunk_lines)
    shadow = ", ".join(config.classifiers.shadow) or "none"

    typer.echo("→ langsniff Status")
    typer.echo(f"Version: {__version__}")
    typer.echo(f"Config path: {resolve_config_path(state.config_path)}")
    typer.echo(f"Corpus: {loader.root}")
    typer.echo(f"Default language: {config.default_language}")
    typer.echo(f"Active classifier: {config.classifiers.active}")
    typer.echo(f"Shadow classifiers: {shadow}")
    typer.echo(f"Memory capacity: {config.classifiers.memory_capacity}")


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI state missing from context.")
    return state


def _load_environment(state: CLIState) -> Config:
    config = _load_config(state.config_path)
    try:
        configure_logging(config.logging)
    except ConfigError as exc:
        _config_failure(exc)
    return config


def _load_config(path: Path | None) -> Config:
    try:
        return load_config(path)
    except ConfigError as exc:
        _config_failure(exc)


def _config_failure(exc: ValueError) -> NoReturn:
    typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(2) from exc


def _build_classifier(config: Config) -> LanguageClassifier:
    try:
        return LanguageClassifier.from_config(config)
    except ValueError as exc:
        _config_failure(exc)


def _trained_classifier(config: Config) -> LanguageClassifier:
    classifier = _build_classifier(config)
    classifier.train()
    if not classifier.is_trained:
        LOGGER.warning("Classifier untrained; answering '%s'.", config.default_language)
    return classifier


def _read_snippet(source: Path | None) -> str:
    if source is None or str(source) == "-":
        return sys.stdin.read()
    path = source.expanduser()
    if not path.is_file():
        typer.secho(f"Snippet file not found: {path}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from None
    return path.read_bytes().decode("utf-8", errors="replace")


__all__ = ["app"]
