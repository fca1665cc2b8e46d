"""Structured Logging — JSON formatting and idempotent setup."""

import json
import logging

from storefront.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "storefront.test", logging.WARNING, __file__, 1, "stock low", None, None,
    )
    record.__dict__.update(extra)
    return record


def test_json_includes_structured_fields():
    line = JSONFormatter().format(_record(order_id=7, product_id=3, error_code="X"))
    payload = json.loads(line)
    assert payload["message"] == "stock low"
    assert payload["level"] == "WARNING"
    assert payload["order_id"] == 7
    assert payload["product_id"] == 3
    assert payload["error_code"] == "X"


def test_json_omits_absent_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert "order_id" not in payload
    assert "user_id" not in payload


def test_setup_logging_is_idempotent():
    before = list(logging.root.handlers)
    try:
        setup_logging("DEBUG", "json")
        setup_logging("INFO", "text")
        named = [h for h in logging.root.handlers if h.get_name() == "storefront"]
        assert len(named) == 1
        assert not isinstance(named[0].formatter, JSONFormatter)
        assert logging.root.level == logging.INFO
    finally:
        for handler in list(logging.root.handlers):
            if handler not in before:
                logging.root.removeHandler(handler)
