"""Structured logging helpers for langsniff."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import ConfigError, LoggingConfig

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
MAIN_LOG_NAME = "langsniff.log"
DEBUG_LOG_NAME = "debug.log"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class ConsoleFormatter(logging.Formatter):
    """One-letter level marker, optionally coloured, before each message.

    With ``show_logger`` the emitting logger name precedes the message.
    """

    MARKERS: dict[int, tuple[str, str]] = {
        logging.DEBUG: ("D", "\x1b[36m"),
        logging.INFO: ("I", "\x1b[32m"),
        logging.WARNING: ("!", "\x1b[33m"),
        logging.ERROR: ("X", "\x1b[31m"),
        logging.CRITICAL: ("X", "\x1b[35m"),
    }
    RESET = "\x1b[0m"

    def __init__(self, use_color: bool, *, show_logger: bool = False) -> None:
        super().__init__("%(name)s: %(message)s" if show_logger else "%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        marker, color = self.MARKERS.get(record.levelno, ("?", "\x1b[37m"))
        if self.use_color:
            marker = f"{color}{marker}{self.RESET}"
        return f"{marker} {super().format(record)}"


def configure_logging(logging_config: LoggingConfig) -> None:
    """Initialise logging handlers.

    Console output always goes to stderr so stdout stays clean for command
    results. File handlers are added only when ``log_dir`` is configured.
    """

    level = _level_from_string(logging_config.level)
    handlers: list[logging.Handler] = [_build_console_handler(show_logger=level <= logging.DEBUG)]

    if logging_config.log_dir is not None:
        log_dir = logging_config.log_dir.expanduser()
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_build_file_handler(log_dir / MAIN_LOG_NAME, level=logging.INFO))
        if logging_config.debug_file:
            handlers.append(_build_file_handler(log_dir / DEBUG_LOG_NAME, level=logging.DEBUG))

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True,
    )


def _build_file_handler(path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(path, maxBytes=5_000_000, backupCount=5)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def _build_console_handler(*, show_logger: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG)
    use_color = _stream_supports_color(handler)
    handler.setFormatter(ConsoleFormatter(use_color, show_logger=show_logger))
    return handler


def _stream_supports_color(handler: logging.Handler) -> bool:
    stream = getattr(handler, "stream", None)
    return bool(getattr(stream, "isatty", lambda: False)())


def _level_from_string(level: str) -> int:
    try:
        return _LEVELS[level.strip().lower()]
    except KeyError as exc:
        raise ConfigError(f"Unknown log level: {level}") from exc


__all__ = ["ConsoleFormatter", "configure_logging"]
