import json
import logging
import sys

from password_please.utils.logging import JsonFormatter, configure_logging, uvicorn_log_config


def _record(msg="Failed to write counter: %s", args=("disk full",), exc_info=None, **extra):
    record = logging.LogRecord("password_please.test", logging.ERROR, __file__, 1, msg, args, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_basic_fields():
    entry = json.loads(JsonFormatter().format(_record()))
    assert entry["level"] == "ERROR"
    assert entry["logger"] == "password_please.test"
    assert entry["message"] == "Failed to write counter: disk full"
    assert "timestamp" in entry
    assert "exception" not in entry


def test_json_formatter_includes_extra_and_exception():
    try:
        raise OSError("disk full")
    except OSError:
        exc_info = sys.exc_info()

    entry = json.loads(JsonFormatter().format(_record(exc_info=exc_info, path="/counter", status_code=500)))
    assert entry["path"] == "/counter"
    assert entry["status_code"] == 500
    assert entry["exception"]["type"] == "OSError"
    assert entry["exception"]["message"] == "disk full"


def test_configure_logging_selects_formatter():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(log_format="json", log_level="debug")
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[-1].formatter, JsonFormatter)

        configure_logging(log_format="text", log_level="bogus")
        assert root.level == logging.INFO
        assert not isinstance(root.handlers[-1].formatter, JsonFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_uvicorn_log_config_matches_format():
    assert "()" not in uvicorn_log_config("text")["formatters"]["default"]
    json_config = uvicorn_log_config("json")
    assert json_config["formatters"]["default"]["()"].endswith("JsonFormatter")
