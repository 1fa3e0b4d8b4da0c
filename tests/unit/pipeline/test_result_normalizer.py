"""Result normalizer: every required field present and of the right kind."""

import math

from hypothesis import given, strategies as st
import pytest

from structgen.core.schema import (
    ArraySchema,
    ObjectSchema,
    Primitive,
    array_of,
    boolean,
    number,
    object_of,
    string,
)
from structgen.operations import schemas
from structgen.pipeline import default_for, normalize

pytestmark = pytest.mark.unit

FEEDBACK = object_of(
    {
        "score": number(minimum=0, maximum=10),
        "comment": string(),
        "status": string(enum=("pass", "partial", "fail")),
        "ok": boolean(),
        "tags": array_of(string()),
        "detail": object_of({"level": number(), "note": string()}),
        "optional": string(),
    },
    required=("score", "comment", "status", "ok", "tags", "detail"),
)


class TestDefaults:
    def test_kind_defaults(self):
        assert default_for(FEEDBACK) == {
            "score": 0,
            "comment": "",
            "status": "",
            "ok": False,
            "tags": [],
            "detail": {"level": 0, "note": ""},
        }

    def test_explicit_default_wins(self):
        assert default_for(string(default="n/a")) == "n/a"
        assert default_for(number(default=5)) == 5

    def test_number_default_is_clamped_into_range(self):
        assert default_for(number(minimum=1, maximum=5)) == 1


class TestNormalize:
    def test_missing_required_fields_are_filled(self):
        assert normalize({"score": 8}, FEEDBACK) == {
            "score": 8,
            "comment": "",
            "status": "",
            "ok": False,
            "tags": [],
            "detail": {"level": 0, "note": ""},
        }

    def test_optional_fields_are_not_invented(self):
        assert "optional" not in normalize({}, FEEDBACK)

    def test_wrong_kinds_are_replaced(self):
        result = normalize(
            {"score": "8", "comment": 3, "ok": "yes", "tags": "a", "detail": []},
            FEEDBACK,
        )
        assert result["score"] == 0
        assert result["comment"] == ""
        assert result["ok"] is False
        assert result["tags"] == []
        assert result["detail"] == {"level": 0, "note": ""}

    def test_bool_is_not_a_number(self):
        assert normalize({"score": True}, FEEDBACK)["score"] == 0

    def test_non_finite_number_is_replaced(self):
        assert normalize({"score": math.inf}, FEEDBACK)["score"] == 0

    @pytest.mark.parametrize(("raw", "expected"), [(85, 10), (-3, 0), (7.5, 7.5)])
    def test_numbers_are_clamped(self, raw, expected):
        assert normalize({"score": raw}, FEEDBACK)["score"] == expected

    def test_enum_values(self):
        assert normalize({"status": "partial"}, FEEDBACK)["status"] == "partial"
        assert normalize({"status": " PASS "}, FEEDBACK)["status"] == "pass"
        assert normalize({"status": "excellent"}, FEEDBACK)["status"] == ""

    def test_array_items_of_wrong_kind_are_dropped(self):
        assert normalize({"tags": ["a", 1, None, "b"]}, FEEDBACK)["tags"] == ["a", "b"]

    def test_array_items_are_normalized(self):
        schema = array_of(object_of({"en": string(), "zh": string()}))
        assert normalize([{"en": "x"}, "junk"], schema) == [{"en": "x", "zh": ""}]

    def test_extra_fields_are_preserved(self):
        result = normalize({"score": 1, "modelSubScores": {"a": 1}}, FEEDBACK)
        assert result["modelSubScores"] == {"a": 1}

    def test_input_is_not_mutated(self):
        value = {"detail": {"level": 99}}
        normalize(value, FEEDBACK)
        assert value == {"detail": {"level": 99}}

    def test_non_object_root(self):
        assert normalize("oops", FEEDBACK) == default_for(FEEDBACK)

    def test_grading_schema_is_fully_defaulted(self):
        result = normalize({}, schemas.SCORING)
        assert result["subScores"] == {
            "content": 0,
            "organization": 0,
            "proficiency": 0,
            "clarity": 0,
        }
        assert result["issueOverview"] == {"critical": [], "general": [], "minor": []}


def _conforms(value, schema) -> bool:
    match schema:
        case ObjectSchema(properties=properties, required=required):
            return isinstance(value, dict) and all(
                name in value and _conforms(value[name], properties[name])
                for name in required
            )
        case ArraySchema(items=items):
            return isinstance(value, list) and all(_conforms(v, items) for v in value)
        case Primitive(kind="string", enum=enum):
            return isinstance(value, str) and (enum is None or value in enum or value == "")
        case Primitive(kind="boolean"):
            return isinstance(value, bool)
        case Primitive(kind="number", minimum=lo, maximum=hi):
            return (
                isinstance(value, int | float)
                and not isinstance(value, bool)
                and (lo is None or value >= lo)
                and (hi is None or value <= hi)
            )
    return False


FIELD_NAMES = ["score", "comment", "status", "tags", "detail", "critiques", "x"]

json_values = st.recursive(
    st.none()
    | st.booleans()
    | st.integers()
    | st.floats()
    | st.text(max_size=8)
    | st.sampled_from(["pass", "PARTIAL", "critical", "Content"]),
    lambda children: st.lists(children, max_size=3)
    | st.dictionaries(
        st.sampled_from(FIELD_NAMES),
        children,
        max_size=4,
    ),
    max_leaves=10,
)


@pytest.mark.parametrize(
    "schema",
    [FEEDBACK, schemas.SCORING, schemas.CRITIQUE, schemas.DRAFT_FEEDBACK],
    ids=["feedback", "scoring", "critique", "draft"],
)
@given(value=json_values)
def test_normalize_is_total(schema, value):
    assert _conforms(normalize(value, schema), schema)


@st.composite
def bounded_numbers(draw):
    lo = draw(st.none() | st.integers(-5, 5))
    hi = draw(st.none() | st.integers(-5, 5))
    if lo is not None and hi is not None and lo > hi:
        lo, hi = hi, lo
    default = draw(
        st.none() | st.integers(lo if lo is not None else -10, hi if hi is not None else 10)
    )
    return number(minimum=lo, maximum=hi, default=default)


@st.composite
def strings(draw):
    enum = draw(
        st.none()
        | st.lists(
            st.sampled_from(["pass", "partial", "fail", "Content", "critical"]),
            min_size=1,
            max_size=3,
            unique=True,
        )
    )
    default = draw(st.none() | st.sampled_from(enum)) if enum else None
    return string(enum=enum, default=default)


@st.composite
def objects(draw, children):
    properties = draw(st.dictionaries(st.sampled_from(FIELD_NAMES), children, max_size=4))
    required = draw(st.sets(st.sampled_from(sorted(properties)))) if properties else set()
    return object_of(properties, required=required)


schema_trees = st.recursive(
    bounded_numbers() | strings() | st.builds(boolean, default=st.none() | st.booleans()),
    lambda children: st.builds(array_of, children) | objects(children),
    max_leaves=8,
)


@given(schema=schema_trees, value=json_values)
def test_normalize_is_total_for_generated_schemas(schema, value):
    assert _conforms(normalize(value, schema), schema)


@given(schema=schema_trees)
def test_default_conforms_for_generated_schemas(schema):
    assert _conforms(default_for(schema), schema)
