import json
import logging

from medreport.utils.logging import RequestContext, StructuredFormatter


def _record(message="Report analysis started"):
    return logging.LogRecord("medreport.test", logging.INFO, __file__, 1, message, None, None)


def test_formatter_tags_records_with_request_id():
    formatter = StructuredFormatter()

    with RequestContext("req-42") as context:
        inside = json.loads(formatter.format(_record()))
    outside = json.loads(formatter.format(_record()))

    assert context.request_id == "req-42"
    assert inside["request_id"] == "req-42"
    assert "request_id" not in outside


def test_request_context_generates_an_id():
    with RequestContext() as context:
        entry = json.loads(StructuredFormatter().format(_record()))

    assert entry["request_id"] == context.request_id
    assert set(entry) == {"timestamp", "level", "logger", "message", "module", "function", "line", "request_id"}
