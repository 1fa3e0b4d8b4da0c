"""parse_structured: sanitize, parse, repair, or fail."""

import logging

import pytest

from structgen.core.exceptions import UnrepairableError
from structgen.response import parse_structured
from structgen.telemetry import InMemoryReporter, TelemetryContext

pytestmark = pytest.mark.unit


def test_fenced_payload_parses_directly():
    assert parse_structured('```json\n{"a": 1, "b": "x"}\n```') == {"a": 1, "b": "x"}


def test_truncated_payload_is_repaired(caplog):
    with caplog.at_level(logging.WARNING, logger="structgen.response.parsing"):
        value = parse_structured('{"a": 1, "list": [1, 2,')

    assert value == {"a": 1, "list": [1, 2]}
    assert isinstance(value["list"], list)
    assert "attempting repair" in caplog.text


def test_array_payload():
    assert parse_structured('Here: [{"en": "a", "zh": "甲"}') == [{"en": "a", "zh": "甲"}]


def test_literal_control_characters_inside_strings_are_tolerated():
    assert parse_structured('{"a": "line1\nline2"}') == {"a": "line1\nline2"}


@pytest.mark.parametrize("raw", ["", "   ", "```json\n```"])
def test_empty_content_is_unrepairable(raw):
    with pytest.raises(UnrepairableError, match="no JSON content"):
        parse_structured(raw)


@pytest.mark.parametrize("raw", ["I cannot help with that.", '{"unfinished', "[tru"])
def test_nothing_salvaged_is_unrepairable(raw):
    with pytest.raises(UnrepairableError, match="salvaged no content") as exc_info:
        parse_structured(raw)
    assert exc_info.value.repaired_text in ("{}", "[]")


def test_explicit_empty_object_is_valid():
    assert parse_structured("{}") == {}


def test_repair_is_counted(monkeypatch):
    monkeypatch.setattr("structgen.telemetry._TELEMETRY_ENABLED", True)
    reporter = InMemoryReporter()
    parse_structured('{"a": [1', telemetry=TelemetryContext(reporter))
    assert reporter.metrics["response.repaired"] == [1]
