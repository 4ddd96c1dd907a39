from __future__ import annotations

import logging

from freight_baseline.logging.init import (
    LOGGER_NAME,
    SUMMARY_LEVEL,
    LabeledFormatter,
    get_logger,
    log_summary,
    setup_logging,
)


def _record(level: int, msg: str) -> logging.LogRecord:
    return logging.LogRecord("x", level, __file__, 1, msg, None, None)


def test_labeled_formatter_labels():
    fmt = LabeledFormatter()
    assert fmt.format(_record(logging.INFO, "hello")) == "INFO hello"
    assert fmt.format(_record(logging.WARNING, "careful")) == "WARN careful"
    assert fmt.format(_record(logging.ERROR, "boom")) == "ERROR boom"
    assert fmt.format(_record(SUMMARY_LEVEL, "files=1")) == "SUMMARY files=1"


def test_setup_logging_is_idempotent():
    first = setup_logging()
    second = setup_logging()
    assert first is second
    assert first.name == LOGGER_NAME
    assert len(first.handlers) == 1
    assert first.propagate is False
    assert get_logger() is first


def test_debug_flag_lowers_level():
    logger = setup_logging(debug=True)
    assert logger.level == logging.DEBUG
    assert logger.handlers[0].level == logging.DEBUG


def test_module_loggers_reach_the_app_handler(capsys):
    setup_logging()
    logging.getLogger("freight_baseline.services.orchestrator").warning("file=x read failed")
    out = capsys.readouterr().out
    assert "WARN file=x read failed" in out


def test_log_summary_prefix(capsys):
    setup_logging()
    log_summary("files=0 success=0")
    assert capsys.readouterr().out.strip() == "SUMMARY files=0 success=0"
