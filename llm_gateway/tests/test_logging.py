"""Structured logging helpers."""
from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler

from llm_gateway.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    _parse_level,  # type: ignore[attr-defined]
    configure_logger,
    get_logger,
    log_event,
    normalized_log_event,
)
from llm_gateway.base.log_support import JsonFormatter, LogContext

from .helpers import ListHandler


def _capture(name: str):
    logger = get_logger(name)
    handler = ListHandler()
    logger.addHandler(handler)
    return logger, handler


def test_parse_level_variants():
    assert _parse_level(None) == logging.INFO
    assert _parse_level("debug") == logging.DEBUG
    assert _parse_level("WARN") == logging.WARNING
    assert _parse_level("bogus", default=logging.ERROR) == logging.ERROR


def test_get_logger_nests_under_gateway_namespace():
    assert get_logger("tests.sample").name == "llm_gateway.tests.sample"
    assert get_logger("llm_gateway.router").name == "llm_gateway.router"
    child = get_logger("llm_gateway.router")
    assert child.propagate is True and not child.handlers


def test_log_event_merges_context_and_drops_none():
    logger, handler = _capture("tests.log_event")
    ctx = LogContext(provider="openai", model="gpt-4o", request_id="r1", extra={"tenant": "t"})
    log_event(logger, "demo", ctx, chunks=3, error=None)
    payload = json.loads(handler.records[-1].getMessage())
    assert payload == {
        "event": "demo",
        "provider": "openai",
        "model": "gpt-4o",
        "request_id": "r1",
        "tenant": "t",
        "chunks": 3,
    }
    logger.removeHandler(handler)


def test_normalized_event_has_required_keys_and_keeps_extras():
    logger, handler = _capture("tests.normalized")
    normalized_log_event(
        logger,
        "stream.end",
        LogContext(provider="p"),
        phase="finalize",
        error_code="timeout",
        emitted=True,
        tokens={"prompt": 1, "completion": 2},
        attempt_extra="x",
        error_code_shadow=None,
    )
    payload = json.loads(handler.records[-1].getMessage())
    for key in REQUIRED_NORMALIZED_KEYS:
        assert key in payload
    assert payload["attempt"] is None
    assert payload["error_code"] == "timeout"
    assert payload["tokens"] == {"prompt": 1, "completion": 2}
    assert payload["attempt_extra"] == "x"
    assert "error_code_shadow" not in payload
    logger.removeHandler(handler)


def test_bind_copies_context():
    base = LogContext(request_id="r1")
    bound = base.bind(provider="groq")
    assert base.provider is None
    assert bound.to_dict() == {"provider": "groq", "request_id": "r1"}


def test_json_formatter_hoists_event_fields():
    record = logging.LogRecord("llm_gateway.x", logging.INFO, __file__, 1, json.dumps({"event": "e", "n": 1}), None, None)
    line = json.loads(JsonFormatter().format(record))
    assert line["event"] == "e" and line["n"] == 1
    assert line["level"] == "INFO" and line["logger"] == "llm_gateway.x"
    assert "msg" not in line


def test_configure_logger_attaches_and_removes_file_handler(tmp_path):
    path = tmp_path / "logs" / "gateway.log"
    logger = configure_logger(file_path=str(path))
    try:
        file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        log_event(get_logger("tests.file"), "to.file", value=1)
        file_handlers[0].flush()
        assert '"event": "to.file"' in path.read_text(encoding="utf-8")
        # same path twice keeps a single handler
        configure_logger(file_path=str(path))
        assert len([h for h in logger.handlers if isinstance(h, RotatingFileHandler)]) == 1
    finally:
        configure_logger(file_path=None)
    assert not [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
