"""Console and file logging for procsynth runs, plus the per-run crash record."""

from __future__ import annotations

import logging
import os
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .params import GeneratorParams

_LOGGER = logging.getLogger("procsynth.logging")
_ROOT_NAME = "procsynth"
LOG_DIR_ENV = "PROCSYNTH_LOG_DIR"
DEBUG_ENV = "PROCSYNTH_DEBUG"
LOG_LEVELS = ("debug", "info", "warning", "error")
_LOG_FILE = "procsynth.log"
_CONSOLE_FORMAT = "%(level_prefix)s%(component)s: %(message)s"
_FILE_FORMAT = "%(asctime)s %(process)d [%(levelname)s] %(name)s: %(message)s"
_FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
# Only problems get a marker; routine render chatter stays plain.
_LEVEL_PREFIXES = {
    logging.WARNING: "⚠️  ",
    logging.ERROR: "❌ ",
    logging.CRITICAL: "💥 ",
}

_logging_configured = False
_console_handler: logging.Handler | None = None


class _ConsoleFormatter(logging.Formatter):
    """Drops the package prefix so records read ``generator: ...``."""

    def format(self, record: logging.LogRecord) -> str:
        record.level_prefix = _LEVEL_PREFIXES.get(record.levelno, "")
        name = record.name
        if name.startswith(_ROOT_NAME + "."):
            name = name[len(_ROOT_NAME) + 1 :]
        record.component = name
        return super().format(record)


def get_log_dir() -> Path:
    configured = os.environ.get(LOG_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".cache" / "procsynth" / "logs"


def get_log_path() -> Path:
    return get_log_dir() / _LOG_FILE


def resolve_console_level(level: str | int | None = None) -> int:
    """Pick the console threshold: explicit level, else ``PROCSYNTH_DEBUG``, else INFO."""
    if level is None:
        return logging.DEBUG if os.environ.get(DEBUG_ENV) else logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level {level!r}; expected one of {', '.join(LOG_LEVELS)}")
    return resolved


def _attach_console(logger: logging.Logger, level: int) -> logging.Handler:
    handler = logging.StreamHandler(stream=sys.__stderr__)
    handler.setLevel(level)
    handler.setFormatter(_ConsoleFormatter(_CONSOLE_FORMAT))
    logger.addHandler(handler)
    return handler


def _attach_file(logger: logging.Logger) -> None:
    try:
        get_log_dir().mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(get_log_path(), encoding="utf-8")
    except OSError as exc:
        _LOGGER.warning("File logging disabled: %s", exc)
        return
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATE_FORMAT))
    logger.addHandler(handler)


def configure_logging(level: str | int | None = None, *, force: bool = False) -> None:
    """Set up the ``procsynth`` logger once; later calls only move the console threshold.

    The console handler is skipped on import when the host application already
    configured the root logger, but an explicit ``level`` (as passed by the CLI)
    always gets one. The file handler records everything at DEBUG.
    """
    global _console_handler, _logging_configured
    logger = logging.getLogger(_ROOT_NAME)
    console_level = resolve_console_level(level)

    if _logging_configured and not force:
        if level is None:
            return
        if _console_handler is None:
            _console_handler = _attach_console(logger, console_level)
        else:
            _console_handler.setLevel(console_level)
        return

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    _console_handler = None

    logger.setLevel(logging.DEBUG)
    if force or level is not None or not logging.getLogger().handlers:
        _console_handler = _attach_console(logger, console_level)
    _attach_file(logger)

    # Records still reach root so pytest's caplog sees them.
    logger.propagate = True
    _logging_configured = True


def log_exception(
    context: str,
    exc: BaseException,
    *,
    params: GeneratorParams | None = None,
    output: str | Path | None = None,
) -> Path | None:
    """Append a crash record for a failed run and return the log path.

    The record carries the validated parameters and target file when the failure
    happened after they were resolved, so a render can be replayed from the log.
    """
    path = get_log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.write(
                f"[{datetime.now().isoformat()}] {context} failed: {type(exc).__name__}: {exc}\n"
            )
            if params is not None:
                handle.write(f"  params: {params.model_dump_json()}\n")
            if output is not None:
                handle.write(f"  output: {output}\n")
            traceback.print_exception(type(exc), exc, exc.__traceback__, file=handle)
            handle.write("\n")
    except OSError as log_exc:
        _LOGGER.warning("Could not write crash record to %s: %s", path, log_exc)
        return None
    return path
