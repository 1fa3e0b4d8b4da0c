"""Static catalog of named operations.

Each operation declares its inputs and a fixed decomposition into
independent stages. Stage specs are static; `OperationDefinition.stages`
binds them to the caller's inputs to produce `StageDefinition` values.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import dataclasses
import logging
from types import MappingProxyType
from typing import Any

from structgen.constants import DEFAULT_TEMPERATURE
from structgen.core.exceptions import InvalidInputError, UnknownOperationError
from structgen.core.schema import ObjectSchema, SchemaDescriptor, merge_objects, object_of, string
from structgen.core.types import GenerationRequest, JSONValue, StageDefinition
from structgen.pipeline.calibration import calibrate_essay_scores
from structgen.pipeline.normalizer import default_for

from . import prompts, schemas
from .prompts import PromptPair

log = logging.getLogger(__name__)

type Inputs = Mapping[str, Any]
type PostProcessor = Callable[
    [dict[str, JSONValue], Inputs, tuple[str, ...]], dict[str, JSONValue]
]

GENERAL_COMMENT_PLACEHOLDER = "暂无评语"


@dataclasses.dataclass(frozen=True, slots=True)
class StageSpec:
    """Static description of one stage, bound to inputs at call time.

    Attributes:
        name: Stage name, unique within its operation.
        schema: Output schema, or None for free text.
        prompt: Builds the (system, user) prompt pair from the inputs.
        output_key: Key the payload is stored under; required for array and
            free-text stages.
        temperature: Sampling temperature for this stage.
        default: Builds the failure default from the inputs. When omitted the
            schema default is used.
    """

    name: str
    schema: SchemaDescriptor | None
    prompt: Callable[[Inputs], PromptPair]
    output_key: str | None = None
    temperature: float = DEFAULT_TEMPERATURE
    default: Callable[[Inputs], JSONValue] | None = None

    def __post_init__(self) -> None:
        """Reject stages whose payload could not be merged."""
        if self.output_key is None and not isinstance(self.schema, ObjectSchema):
            raise ValueError(
                f"Stage '{self.name}' needs an output_key unless its schema is an object"
            )

    @property
    def contribution(self) -> ObjectSchema:
        """The part of the operation result this stage is responsible for."""
        if self.output_key is None:
            return self.schema  # type: ignore[return-value]
        return object_of({self.output_key: self.schema or string()})

    def bind(self, inputs: Inputs) -> StageDefinition:
        """Create the concrete stage for one call."""
        system_prompt, user_prompt = self.prompt(inputs)
        if self.default is not None:
            default = self.default(inputs)
        elif self.output_key is not None:
            default = default_for(self.schema or string())
        else:
            default = default_for(self.contribution)
        return StageDefinition(
            name=self.name,
            request=GenerationRequest(
                system_prompt=system_prompt,
                user_prompt=user_prompt,
                schema=self.schema,
                temperature=self.temperature,
            ),
            default=default,
            output_key=self.output_key,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class OperationDefinition:
    """A named operation: validated inputs, stages and optional post-processing."""

    name: str
    stage_specs: tuple[StageSpec, ...]
    required_inputs: tuple[str, ...]
    optional_inputs: tuple[str, ...] = ()
    choices: Mapping[str, tuple[str, ...]] = dataclasses.field(default_factory=dict)
    postprocess: PostProcessor | None = None
    description: str = ""

    @property
    def result_schema(self) -> ObjectSchema:
        """Merge of every stage contribution; the normalizer runs against it."""
        return merge_objects(*(spec.contribution for spec in self.stage_specs))

    def validate_inputs(self, inputs: Inputs) -> dict[str, Any]:
        """Return the known inputs, raising if any required one is missing.

        Raises:
            InvalidInputError: On a missing or blank required input, or a
                value outside the declared choices.
        """
        missing = [key for key in self.required_inputs if _is_blank(inputs.get(key))]
        if missing:
            raise InvalidInputError(
                f"Operation '{self.name}' is missing required input(s): {', '.join(missing)}"
            )
        for key, allowed in self.choices.items():
            if key in inputs and inputs[key] not in allowed:
                raise InvalidInputError(
                    f"Operation '{self.name}': {key} must be one of {list(allowed)}, "
                    f"got {inputs[key]!r}"
                )
        known = set(self.required_inputs) | set(self.optional_inputs)
        unknown = sorted(set(inputs) - known)
        if unknown:
            log.debug("Operation '%s' ignores unknown input(s): %s", self.name, unknown)
        return {key: value for key, value in inputs.items() if key in known}

    def stages(self, inputs: Inputs) -> tuple[StageDefinition, ...]:
        """Validate `inputs` and bind every stage spec to them."""
        cleaned = self.validate_inputs(inputs)
        return tuple(spec.bind(cleaned) for spec in self.stage_specs)


# --- Input helpers ---


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list | tuple):
        return not value
    return False


def as_text(value: Any) -> str:
    """Render an input as prompt text."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list | tuple):
        return "\n".join(as_text(v) for v in value)
    return str(value)


def as_list(value: Any) -> list[str]:
    """Coerce a list input; strings are split on commas and newlines.

    Vocabulary entries given as objects contribute their ``word`` field.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.replace("\n", ",").split(",") if part.strip()]
    items: list[str] = []
    for item in value:
        if isinstance(item, Mapping):
            item = item.get("word", "")
        text = str(item).strip()
        if text:
            items.append(text)
    return items


def body_text(value: Any) -> str:
    """Format essay body paragraphs, given as text or ``{dimension, draft}`` items."""
    if not isinstance(value, list | tuple):
        return as_text(value)
    blocks = []
    for i, paragraph in enumerate(value, start=1):
        if isinstance(paragraph, Mapping):
            dimension = paragraph.get("dimension", "")
            blocks.append(f"[Dimension {i}: {dimension}]\n{as_text(paragraph.get('draft'))}")
        else:
            blocks.append(as_text(paragraph))
    return "\n\n".join(blocks)


# --- Catalog ---


def _scoring_default(_: Inputs) -> JSONValue:
    default = default_for(schemas.SCORING)
    default["generalComment"] = GENERAL_COMMENT_PLACEHOLDER  # type: ignore[index]
    return default


def _grade_postprocess(
    data: dict[str, JSONValue], inputs: Inputs, failed_stages: tuple[str, ...] = ()
) -> dict[str, JSONValue]:
    if "scoring" in failed_stages:
        # A failed scoring stage keeps its zero placeholder scores.
        log.info("Skipping score calibration: the scoring stage failed")
        result = dict(data)
        result["modelSubScores"] = dict(data["subScores"])  # type: ignore[arg-type]
        return result
    return calibrate_essay_scores(
        data, essay=as_text(inputs["essay"]), topic=as_text(inputs.get("topic")) or None
    )


def _grade_stages() -> tuple[StageSpec, ...]:
    def essay(i: Inputs) -> tuple[str, str | None]:
        return as_text(i["essay"]), as_text(i.get("topic")) or None

    return (
        StageSpec(
            "scoring",
            schemas.SCORING,
            lambda i: prompts.grade_scoring(*essay(i)),
            temperature=0.0,
            default=_scoring_default,
        ),
        StageSpec(
            "critique",
            schemas.CRITIQUE,
            lambda i: prompts.grade_critique(*essay(i)),
            temperature=0.0,
        ),
        StageSpec(
            "style-polish",
            schemas.STYLE_POLISH,
            lambda i: prompts.grade_style_polish(*essay(i)),
            temperature=0.3,
            default=lambda i: {"contrastiveLearning": [], "polishedEssay": as_text(i["essay"])},
        ),
    )


_DEFINITIONS: tuple[OperationDefinition, ...] = (
    OperationDefinition(
        "brainstorm",
        (
            StageSpec(
                "cards",
                schemas.INSPIRATION_CARDS,
                lambda i: prompts.brainstorm(as_text(i["topic"])),
                output_key="cards",
            ),
        ),
        required_inputs=("topic",),
        description="Inspiration cards, one per perspective on a topic",
    ),
    OperationDefinition(
        "validate-idea",
        (
            StageSpec(
                "evaluation",
                schemas.IDEA_EVALUATION,
                lambda i: prompts.validate_idea(
                    as_text(i["topic"]), as_text(i["dimension"]), as_text(i["idea"])
                ),
            ),
        ),
        required_inputs=("topic", "dimension", "idea"),
        description="Relevance verdict for a student's idea",
    ),
    OperationDefinition(
        "language-scaffolds",
        (
            StageSpec(
                "scaffold",
                schemas.SCAFFOLD,
                lambda i: prompts.language_scaffolds(
                    as_text(i["topic"]), as_text(i["dimension"]), as_text(i["idea"])
                ),
            ),
        ),
        required_inputs=("topic", "dimension", "idea"),
        description="Vocabulary, collocations and sentence frames for an idea",
    ),
    OperationDefinition(
        "dimension-keywords",
        (
            StageSpec(
                "keywords",
                schemas.KEYWORDS,
                lambda i: prompts.dimension_keywords(
                    as_text(i["dimension"]), as_text(i.get("topic")) or None
                ),
                output_key="keywords",
            ),
        ),
        required_inputs=("dimension",),
        optional_inputs=("topic",),
        description="Bilingual keywords for a dimension",
    ),
    OperationDefinition(
        "validate-sentence",
        (
            StageSpec(
                "evaluation",
                schemas.SENTENCE_EVALUATION,
                lambda i: prompts.validate_sentence(as_text(i["sentence"]), as_text(i["topic"])),
            ),
        ),
        required_inputs=("sentence", "topic"),
        description="Grammar and relevance check for one sentence",
    ),
    OperationDefinition(
        "more-collocations",
        (
            StageSpec(
                "collocations",
                schemas.COLLOCATIONS,
                lambda i: prompts.more_collocations(as_text(i["topic"]), as_text(i["idea"])),
                output_key="collocations",
            ),
        ),
        required_inputs=("topic", "idea"),
        description="Additional advanced collocations for an idea",
    ),
    OperationDefinition(
        "analyze-draft",
        (
            StageSpec(
                "feedback",
                schemas.DRAFT_FEEDBACK,
                lambda i: prompts.analyze_draft(
                    as_text(i["topic"]),
                    as_text(i["dimension"]),
                    as_text(i["draft"]),
                    as_list(i.get("vocabulary")),
                ),
            ),
        ),
        required_inputs=("topic", "dimension", "draft"),
        optional_inputs=("vocabulary",),
        description="Scored feedback and a polished version of a paragraph",
    ),
    OperationDefinition(
        "essay-frame",
        (
            StageSpec(
                "frame",
                schemas.ESSAY_FRAME,
                lambda i: prompts.essay_frame(as_text(i["topic"]), body_text(i["body"])),
            ),
        ),
        required_inputs=("topic", "body"),
        description="Introduction and conclusion matching the body paragraphs",
    ),
    OperationDefinition(
        "grade-essay",
        _grade_stages(),
        required_inputs=("essay",),
        optional_inputs=("topic",),
        postprocess=_grade_postprocess,
        description="Calibrated CET score, critiques and a polished essay",
    ),
    OperationDefinition(
        "retraining",
        (
            StageSpec(
                "retraining",
                schemas.RETRAINING,
                lambda i: prompts.retraining(
                    as_text(i["contrastive_summary"]), as_text(i["polished_essay"])
                ),
                temperature=0.3,
            ),
        ),
        required_inputs=("contrastive_summary", "polished_essay"),
        description="Exercises and materials built from a graded essay",
    ),
    OperationDefinition(
        "drill-items",
        (
            StageSpec(
                "drills",
                schemas.DRILL_ITEMS,
                lambda i: prompts.drill_items(
                    as_text(i["topic"]),
                    i["mode"],
                    as_list(i.get("past_errors")),
                    as_list(i.get("target_vocab")),
                ),
                output_key="drills",
            ),
        ),
        required_inputs=("topic", "mode"),
        optional_inputs=("past_errors", "target_vocab"),
        choices={"mode": schemas.DRILL_MODES},
        description="Adaptive multiple-choice drills",
    ),
    OperationDefinition(
        "evaluate-retraining",
        (
            StageSpec(
                "evaluation",
                schemas.RETRAINING_EVALUATION,
                lambda i: prompts.evaluate_retraining(
                    as_text(i["question"]), as_text(i["strategy_hint"]), as_text(i["answer"])
                ),
            ),
        ),
        required_inputs=("question", "strategy_hint", "answer"),
        description="Pass/partial/fail verdict on a retraining answer",
    ),
)

OPERATIONS: Mapping[str, OperationDefinition] = MappingProxyType(
    {op.name: op for op in _DEFINITIONS}
)


def get_operation(name: str) -> OperationDefinition:
    """Look up an operation by name.

    Raises:
        UnknownOperationError: If `name` is not in the catalog.
    """
    try:
        return OPERATIONS[name]
    except KeyError:
        raise UnknownOperationError(
            f"Unknown operation '{name}'. Available: {', '.join(sorted(OPERATIONS))}"
        ) from None


def list_operations() -> list[str]:
    """Names of every cataloged operation."""
    return sorted(OPERATIONS)
