import logging

import pytest

from wiremix.trace import initialize_logging, trace_dbg


@pytest.fixture
def clean_logger():
    logger = logging.getLogger("wiremix")
    before = list(logger.handlers)
    level = logger.level
    yield logger
    for handler in list(logger.handlers):
        if handler not in before:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


def flush(logger):
    for handler in logger.handlers:
        handler.flush()


def test_initialize_logging_writes_file(tmp_path, monkeypatch, clean_logger):
    monkeypatch.setenv("WIREMIX_LOG", "debug")
    path = initialize_logging(tmp_path)
    assert path == tmp_path / "wiremix.log"
    clean_logger.debug("hello from test")
    flush(clean_logger)
    text = path.read_text()
    assert "hello from test" in text
    assert "test_trace.py" in text


def test_initialize_logging_truncates_and_creates_dirs(tmp_path, monkeypatch, clean_logger):
    monkeypatch.setenv("WIREMIX_LOG", "info")
    directory = tmp_path / "a" / "b"
    directory.mkdir(parents=True)
    (directory / "wiremix.log").write_text("stale contents\n")
    path = initialize_logging(directory)
    flush(clean_logger)
    assert "stale contents" not in path.read_text()


def test_level_filters(tmp_path, monkeypatch, clean_logger):
    monkeypatch.setenv("WIREMIX_LOG", "warn")
    path = initialize_logging(tmp_path)
    clean_logger.debug("quiet message")
    clean_logger.warning("loud message")
    flush(clean_logger)
    text = path.read_text()
    assert "loud message" in text
    assert "quiet message" not in text


def test_missing_level_variable(tmp_path, monkeypatch):
    monkeypatch.delenv("WIREMIX_LOG", raising=False)
    with pytest.raises(RuntimeError):
        initialize_logging(tmp_path)


def test_invalid_level(tmp_path, monkeypatch):
    monkeypatch.setenv("WIREMIX_LOG", "loudest")
    with pytest.raises(ValueError):
        initialize_logging(tmp_path)


def test_trace_dbg_returns_value_and_logs(caplog):
    value = {"peaks": [0.5]}
    with caplog.at_level(logging.DEBUG, logger="wiremix"):
        result = trace_dbg(value, "peaks")
    assert result is value
    record = caplog.records[-1]
    assert record.levelno == logging.DEBUG
    assert repr(value) in record.getMessage()
    assert "peaks" in record.getMessage()


def test_trace_dbg_custom_level_and_logger(caplog):
    with caplog.at_level(logging.INFO, logger="wiremix.custom"):
        result = trace_dbg(7, level=logging.INFO, logger="wiremix.custom")
    assert result == 7
    record = caplog.records[-1]
    assert record.name == "wiremix.custom"
    assert record.levelno == logging.INFO
    assert record.getMessage() == "value=7"