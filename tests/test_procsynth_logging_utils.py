from __future__ import annotations

import logging
from pathlib import Path

import pytest

from procsynth.logging_utils import (
    DEBUG_ENV,
    LOG_DIR_ENV,
    configure_logging,
    get_log_dir,
    get_log_path,
    log_exception,
    resolve_console_level,
)
from procsynth.params import GeneratorParams


def _console_handlers() -> list[logging.Handler]:
    return [
        h
        for h in logging.getLogger("procsynth").handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]


def test_log_path_uses_env_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    assert get_log_dir() == tmp_path
    assert get_log_path() == tmp_path / "procsynth.log"


def test_configure_logging_adds_file_handler(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    configure_logging(force=True)
    logger = logging.getLogger("procsynth")
    file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
    assert any(Path(h.baseFilename) == tmp_path / "procsynth.log" for h in file_handlers)
    assert file_handlers[0].level == logging.DEBUG


def test_console_level_follows_argument_then_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(DEBUG_ENV, raising=False)
    assert resolve_console_level() == logging.INFO
    assert resolve_console_level("warning") == logging.WARNING
    monkeypatch.setenv(DEBUG_ENV, "1")
    assert resolve_console_level() == logging.DEBUG
    assert resolve_console_level("error") == logging.ERROR


def test_unknown_console_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="unknown log level"):
        resolve_console_level("loud")


def test_reconfigure_moves_only_console_threshold(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    configure_logging("info", force=True)
    handlers_before = list(logging.getLogger("procsynth").handlers)

    configure_logging("error")

    assert logging.getLogger("procsynth").handlers == handlers_before
    assert [h.level for h in _console_handlers()] == [logging.ERROR]
    configure_logging("info")


def test_console_records_drop_package_prefix(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    configure_logging("debug", force=True)
    (handler,) = _console_handlers()
    warning = logging.LogRecord(
        "procsynth.generator", logging.WARNING, __file__, 1, "clipped %d samples", (3,), None
    )
    info = logging.LogRecord("procsynth.cli", logging.INFO, __file__, 1, "done", None, None)
    assert handler.format(warning).endswith("generator: clipped 3 samples")
    assert handler.format(info) == "cli: done"
    configure_logging("info")


def test_log_exception_appends_traceback(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    try:
        raise ValueError("bad reverb")
    except ValueError as exc:
        path = log_exception("render", exc)

    assert path == tmp_path / "procsynth.log"
    content = path.read_text(encoding="utf-8")
    assert "render failed: ValueError: bad reverb" in content
    assert "Traceback" in content
    assert "params:" not in content


def test_log_exception_records_run_context(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path))
    params = GeneratorParams(duration=2.0, attack=0.5, release=0.5, voices=3)
    try:
        raise OSError("disk full")
    except OSError as exc:
        path = log_exception("render", exc, params=params, output="ambient.wav")

    assert path is not None
    lines = path.read_text(encoding="utf-8").splitlines()
    params_line = next(line for line in lines if line.startswith("  params: "))
    restored = GeneratorParams.model_validate_json(params_line.removeprefix("  params: "))
    assert restored == params
    assert "  output: ambient.wav" in lines
