import json
import logging

from pageview_chart.logging_setup import REQUEST_ID_CONTEXT, ContextFilter, JsonFormatter, bind_view_id


def _record(message="hello", **extra):
    record = logging.LogRecord("pageview_chart.view", logging.WARNING, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_context_and_extra():
    token = REQUEST_ID_CONTEXT.set("req-1")
    try:
        with bind_view_id("view-9"):
            record = _record(generation=3)
            ContextFilter().filter(record)
    finally:
        REQUEST_ID_CONTEXT.reset(token)

    payload = json.loads(JsonFormatter().format(record))
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "pageview_chart.view"
    assert payload["message"] == "hello"
    assert payload["request_id"] == "req-1"
    assert payload["view_id"] == "view-9"
    assert payload["extra"] == {"generation": 3}


def test_view_id_is_unbound_after_block():
    with bind_view_id("temp"):
        pass
    record = _record()
    ContextFilter().filter(record)
    assert record.view_id is None
