"""Tests for structured JSON logging."""

import json
import logging
import os
import sys

from resultlens.core.logging import JSONFormatter, setup_logging


def _record(**kwargs) -> logging.LogRecord:
    defaults = dict(
        name="resultlens.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=1,
        msg="test",
        args=(),
        exc_info=None,
    )
    defaults.update(kwargs)
    return logging.LogRecord(**defaults)


def test_json_formatter_produces_valid_json():
    line = JSONFormatter().format(_record(msg="hello %s", args=("world",)))
    data = json.loads(line)
    assert data["level"] == "INFO"
    assert data["logger"] == "resultlens.test"
    assert data["msg"] == "hello world"
    assert "ts" in data


def test_json_formatter_includes_report():
    record = _record()
    record.report = "trivy.json"  # type: ignore[attr-defined]
    data = json.loads(JSONFormatter().format(record))
    assert data["report"] == "trivy.json"


def test_json_formatter_includes_exception():
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record(level=logging.ERROR, msg="failed", exc_info=sys.exc_info())
    data = json.loads(JSONFormatter().format(record))
    assert "ValueError: boom" in data["exc"]


def test_setup_logging_uses_log_level_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    setup_logging()
    assert logging.getLogger().level == logging.DEBUG


def test_setup_logging_defaults_to_info():
    os.environ.pop("LOG_LEVEL", None)
    setup_logging()
    assert logging.getLogger().level == logging.INFO


def test_parser_failures_are_logged_as_json(capsys):
    from resultlens.parsers.checkov_parser import CheckovParser

    setup_logging()
    CheckovParser().parse([{}], "p", "checkov.json")
    lines = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]
    failure = [entry for entry in lines if entry["msg"] == "Error parsing Checkov data"][0]
    assert failure["level"] == "ERROR"
    assert failure["report"] == "checkov.json"
    assert "first entry is not a Checkov check" in failure["exc"]
