# tests/test_logging.py
import logging

from newsbubble.logging_setup import EventFormatter, RequestIdFilter, request_id_var


def _format(msg, **extra):
    record = logging.makeLogRecord({"name": "newsbubble.recommender", "levelname": "INFO", "msg": msg, **extra})
    RequestIdFilter().filter(record)
    return EventFormatter("%(name)s | req=%(request_id)s | %(message)s").format(record)


def test_extras_are_appended_sorted():
    line = _format("RECO_DONE", user_id="u1", elapsed_ms=12, fallback=True)
    assert line == "newsbubble.recommender | req=- | RECO_DONE | elapsed_ms=12 fallback=True user_id=u1"


def test_plain_message_has_no_trailer():
    assert _format("LOGGING_READY") == "newsbubble.recommender | req=- | LOGGING_READY"


def test_request_id_comes_from_context():
    token = request_id_var.set("abc123")
    try:
        assert "req=abc123" in _format("HTTP_EXCEPTION", status_code=401)
    finally:
        request_id_var.reset(token)
