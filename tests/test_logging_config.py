import json
import logging

from scaffold.logging_config import JsonFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        name="scaffold",
        level=logging.INFO,
        pathname="interceptor.py",
        lineno=1,
        msg="interceptor",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields():
    journal = {"id": "abc", "success": True, "cost_seconds": 0.1}

    output = json.loads(JsonFormatter().format(_record(journal=journal)))

    assert output["message"] == "interceptor"
    assert output["level"] == "INFO"
    assert output["logger"] == "scaffold"
    assert output["journal"] == journal
    assert "lineno" not in output


def test_json_formatter_includes_exception():
    try:
        raise ValueError("bad")
    except ValueError:
        import sys

        record = _record()
        record.exc_info = sys.exc_info()

    output = json.loads(JsonFormatter().format(record))

    assert "ValueError: bad" in output["exception"]


def test_setup_logging_returns_scaffold_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        logger = setup_logging("warning", json_output=True)

        assert logger.name == "scaffold"
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers = saved_handlers
        root.setLevel(saved_level)
