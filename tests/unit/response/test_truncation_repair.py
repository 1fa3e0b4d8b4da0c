"""Truncation repair: every prefix of a valid payload becomes parseable."""

import json

from hypothesis import given, settings, strategies as st
import pytest

from structgen.response import repair, sanitize
from structgen.response.repair import close_string

pytestmark = pytest.mark.unit

SAMPLE_PAYLOADS = [
    {"a": 1, "list": [1, 2, 3], "nested": {"ok": True, "none": None}},
    {
        "totalScore": 11.5,
        "subScores": {"content": 3, "organization": 2.5},
        "generalComment": 'He said "fine"\\ and left.\nNew line',
        "critiques": [{"original": "I has", "severity": "critical"}],
    },
    [{"en": "sustainable", "zh": "可持续的"}, {"en": "carbon", "zh": "碳"}],
    {"score": -1.5e3, "flags": [False, True], "empty": {}, "blank": []},
]


def _encodings(payload):
    yield json.dumps(payload)
    yield json.dumps(payload, ensure_ascii=False)
    yield json.dumps(payload, indent=2)


@pytest.mark.parametrize("payload", SAMPLE_PAYLOADS)
def test_every_truncation_offset_parses(payload):
    for text in _encodings(payload):
        for offset in range(len(text) + 1):
            prefix = text[:offset]
            repaired = repair(sanitize(prefix))
            try:
                json.loads(repaired)
            except ValueError:  # pragma: no cover - failure report
                pytest.fail(f"offset {offset}: {prefix!r} -> {repaired!r}")


def test_complete_payload_is_unchanged_semantically():
    text = json.dumps(SAMPLE_PAYLOADS[0])
    assert json.loads(repair(text)) == SAMPLE_PAYLOADS[0]


class TestRepairSteps:
    def test_open_array_and_trailing_comma(self):
        repaired = json.loads(repair('{"a": 1, "list": [1, 2,'))
        assert repaired == {"a": 1, "list": [1, 2]}

    def test_unterminated_string_is_closed(self):
        assert json.loads(repair('{"a": "hel')) == {"a": "hel"}

    def test_key_without_value_is_dropped(self):
        assert json.loads(repair('{"a": 1, "b"')) == {"a": 1}
        assert json.loads(repair('{"a": 1, "b":')) == {"a": 1}
        assert json.loads(repair('{"a": 1, "b": ')) == {"a": 1}

    def test_partial_key_is_dropped(self):
        assert json.loads(repair('{"a": 1, "bet')) == {"a": 1}

    @pytest.mark.parametrize("tail", ["tr", "fals", "nu", "-", "1.", "1e", "2E+"])
    def test_partial_literal_is_dropped(self, tail):
        assert json.loads(repair(f'{{"a": [1, {tail}')) == {"a": [1]}

    def test_complete_final_string_value_is_kept(self):
        assert json.loads(repair('{"a": 1, "b": "done"')) == {"a": 1, "b": "done"}

    def test_brackets_closed_innermost_first(self):
        assert repair('{"a": [{"b": [1') == '{"a": [{"b": [1]}]}'

    def test_brackets_inside_strings_are_ignored(self):
        assert json.loads(repair('{"a": "[{", "b": [')) == {"a": "[{", "b": []}

    def test_nothing_salvageable_falls_back_by_root(self):
        assert repair("") == "{}"
        assert repair("{") == "{}"
        assert repair('{"') == "{}"
        assert repair("[") == "[]"
        assert repair("garbage") == "{}"


class TestCloseString:
    def test_escaped_quote_does_not_terminate(self):
        assert close_string(r'"say \"hi') == r'"say \"hi"'

    def test_dangling_backslash_dropped(self):
        assert close_string('"abc\\') == '"abc"'

    def test_partial_unicode_escape_dropped(self):
        assert close_string('"caf\\u00') == '"caf"'

    def test_complete_unicode_escape_kept(self):
        assert close_string('"caf\\u00e9') == '"caf\\u00e9"'

    def test_closed_text_untouched(self):
        assert close_string('{"a": "b"}') == '{"a": "b"}'


json_documents = st.recursive(
    st.none()
    | st.booleans()
    | st.integers()
    | st.floats(allow_nan=False, allow_infinity=False)
    | st.text(max_size=12),
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=6), children, max_size=4),
    max_leaves=12,
).filter(lambda v: isinstance(v, dict | list))


@settings(max_examples=75, deadline=None)
@given(json_documents, st.data())
def test_any_prefix_of_generated_payload_parses(document, data):
    text = json.dumps(document, ensure_ascii=data.draw(st.booleans()))
    offset = data.draw(st.integers(min_value=0, max_value=len(text)))
    json.loads(repair(sanitize(text[:offset])))
