"""Configuration loading and validation."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .classifiers.bayes import DEFAULT_ASSUMED_PROBABILITY, DEFAULT_WEIGHT
from .classifiers.match_tree import DEFAULT_DEPTH
from .classifiers.memory import DEFAULT_MEMORY_CAPACITY

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/langsniff/config.yaml")
DEFAULT_LANGUAGE = "js"
DEFAULT_LOG_LEVEL = "info"
DEFAULT_ACTIVE_CLASSIFIER = "naive_bayes"
KNOWN_CLASSIFIERS: tuple[str, ...] = ("naive_bayes", "match_tree", "tfidf_sgd")


class ConfigError(ValueError):
    """Raised when configuration is invalid or missing."""


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str = DEFAULT_LOG_LEVEL
    debug_file: bool = False
    log_dir: Path | None = None


@dataclass(frozen=True)
class ClassifierConfig:
    """Which classifiers run and how they are tuned."""

    active: str = DEFAULT_ACTIVE_CLASSIFIER
    shadow: tuple[str, ...] = ()
    memory_capacity: int = DEFAULT_MEMORY_CAPACITY
    weight: float = DEFAULT_WEIGHT
    assumed_probability: float = DEFAULT_ASSUMED_PROBABILITY
    match_tree_depth: int = DEFAULT_DEPTH


@dataclass(frozen=True)
class Config:
    """Fully parsed configuration."""

    corpus_dir: Path | None = None
    chunk_lines: int | None = None
    default_language: str = DEFAULT_LANGUAGE
    classifiers: ClassifierConfig = field(default_factory=ClassifierConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Path | str | None = None) -> Config:
    """Load and validate configuration from YAML.

    An explicit path (argument or ``$LANGSNIFF_CONFIG``) must exist; when the
    default location is missing the built-in defaults are used.
    """

    config_path, explicit = _resolve_config_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        LOGGER.debug("No config at %s; using defaults.", config_path)
        return Config()

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return _parse_config(raw)


def resolve_config_path(explicit: Path | str | None = None) -> Path:
    return _resolve_config_path(explicit)[0]


def _resolve_config_path(explicit: Path | str | None) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit).expanduser(), True
    env_path = os.environ.get("LANGSNIFF_CONFIG")
    if env_path:
        return Path(env_path).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def _parse_config(raw: dict[str, Any]) -> Config:
    corpus_dir = raw.get("corpus_dir")
    return Config(
        corpus_dir=Path(corpus_dir).expanduser() if corpus_dir else None,
        chunk_lines=_parse_optional_positive_int(raw.get("chunk_lines"), "chunk_lines"),
        default_language=_parse_default_language(raw.get("default_language")),
        classifiers=_parse_classifiers(raw.get("classifiers")),
        logging=_parse_logging(raw.get("logging")),
    )


def _parse_default_language(value: Any) -> str:
    if value is None:
        return DEFAULT_LANGUAGE
    if not isinstance(value, str) or not value.strip():
        raise ConfigError("default_language must be a non-empty string.")
    return value.strip()


def _parse_classifiers(value: Any) -> ClassifierConfig:
    if value is None:
        return ClassifierConfig()
    if not isinstance(value, dict):
        raise ConfigError("classifiers must be a mapping.")

    active = str(value.get("active", DEFAULT_ACTIVE_CLASSIFIER)).strip()
    if active not in KNOWN_CLASSIFIERS:
        raise ConfigError(f"Unknown classifier '{active}' in classifiers.active.")

    raw_shadow = value.get("shadow") or []
    if isinstance(raw_shadow, str):
        raw_shadow = [raw_shadow]
    if not isinstance(raw_shadow, list):
        raise ConfigError("classifiers.shadow must be a list.")
    shadow: list[str] = []
    for idx, entry in enumerate(raw_shadow, start=1):
        name = str(entry).strip()
        if name not in KNOWN_CLASSIFIERS:
            raise ConfigError(f"Unknown classifier '{name}' in classifiers.shadow[{idx}].")
        if name == active:
            raise ConfigError(f"Classifier '{name}' cannot be both active and shadow.")
        if name not in shadow:
            shadow.append(name)

    memory_capacity = _parse_optional_positive_int(
        value.get("memory_capacity"), "classifiers.memory_capacity"
    )
    match_tree_depth = _parse_optional_positive_int(
        value.get("match_tree_depth"), "classifiers.match_tree_depth"
    )
    weight = _parse_float(value.get("weight", DEFAULT_WEIGHT), "classifiers.weight")
    if weight <= 0:
        raise ConfigError("classifiers.weight must be positive.")
    assumed = _parse_float(
        value.get("assumed_probability", DEFAULT_ASSUMED_PROBABILITY),
        "classifiers.assumed_probability",
    )
    if not 0 < assumed <= 1:
        raise ConfigError("classifiers.assumed_probability must be in (0, 1].")

    return ClassifierConfig(
        active=active,
        shadow=tuple(shadow),
        memory_capacity=memory_capacity or DEFAULT_MEMORY_CAPACITY,
        weight=weight,
        assumed_probability=assumed,
        match_tree_depth=match_tree_depth or DEFAULT_DEPTH,
    )


def _parse_optional_positive_int(value: Any, field_name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigError(f"{field_name} must be positive.")
    return value


def _parse_float(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{field_name} must be a number.")
    return float(value)


def _parse_logging(value: Any) -> LoggingConfig:
    if value is None:
        return LoggingConfig()
    if not isinstance(value, dict):
        raise ConfigError("logging must be a mapping.")
    level = str(value.get("level", DEFAULT_LOG_LEVEL)).lower()
    debug_file = bool(value.get("debug_file", False))
    log_dir = value.get("log_dir")
    return LoggingConfig(
        level=level,
        debug_file=debug_file,
        log_dir=Path(log_dir).expanduser() if log_dir else None,
    )


__all__ = [
    "ClassifierConfig",
    "Config",
    "ConfigError",
    "DEFAULT_LANGUAGE",
    "KNOWN_CLASSIFIERS",
    "LoggingConfig",
    "load_config",
    "resolve_config_path",
]
