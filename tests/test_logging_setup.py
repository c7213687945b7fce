"""Tests for logging initialisation and the gated debug traces."""
import logging

from jsontmx.logging_setup import (
    DEBUG_ENV_VAR,
    LOGGER_NAME,
    init_logging,
    is_debug_logging_enabled,
    log_debug,
    make_log_limit,
    set_debug_logging,
)


def _file_handlers(logger: logging.Logger) -> list[logging.FileHandler]:
    return [h for h in logger.handlers if isinstance(h, logging.FileHandler)]


def test_repeated_init_reuses_file_handler(tmp_path) -> None:
    log_file = tmp_path / "logs" / "run.log"
    logger = init_logging("info", log_file)
    try:
        init_logging("debug", log_file)
        handlers = [h for h in _file_handlers(logger) if h.baseFilename == str(log_file.resolve())]
        assert len(handlers) == 1
        assert handlers[0].level == logging.DEBUG

        logger.info("written once")
        handlers[0].flush()
        assert log_file.read_text(encoding="utf-8").count("written once") == 1
    finally:
        for handler in _file_handlers(logger):
            logger.removeHandler(handler)
            handler.close()


def test_environment_overrides_debug_flag(monkeypatch) -> None:
    assert not is_debug_logging_enabled()
    set_debug_logging(True)
    assert is_debug_logging_enabled()
    monkeypatch.setenv(DEBUG_ENV_VAR, "0")
    assert not is_debug_logging_enabled()
    monkeypatch.setenv(DEBUG_ENV_VAR, "1")
    set_debug_logging(False)
    assert is_debug_logging_enabled()


def test_log_limit_caps_entries() -> None:
    messages: list[str] = []

    class _Collect(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            messages.append(record.getMessage())

    logger = logging.getLogger(f"{LOGGER_NAME}.debug")
    handler = _Collect()
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        log_debug("hidden")
        set_debug_logging(True)
        limit = make_log_limit(2)
        for index in range(5):
            log_debug("entry %d", index, limit=limit)
        log_debug("unlimited")
    finally:
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    assert messages == ["entry 0", "entry 1", "unlimited"]
