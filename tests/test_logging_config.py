"""
Tests for the logger setup.
"""

import json
import logging
import sys

from fupisha.logging_config import JsonFormatter


def make_record(msg, *args, exc_info=None):
    return logging.LogRecord("fupisha", logging.INFO, __file__, 1, msg, args, exc_info)


class TestJsonFormatter:

    def test_quotes_in_message_stay_valid_json(self):
        line = JsonFormatter().format(make_record("alias %r not found", 'say "hi"'))

        entry = json.loads(line)
        assert entry["message"] == "alias 'say \"hi\"' not found"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "fupisha"
        assert entry["timestamp"]

    def test_one_line_per_record(self):
        line = JsonFormatter().format(make_record("first\nsecond"))

        assert "\n" not in line
        assert json.loads(line)["message"] == "first\nsecond"

    def test_exception_is_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record("failed", exc_info=sys.exc_info())

        entry = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in entry["exception"]
