"""Core data types that flow through a structured-generation call.

Requests and responses are immutable and confined to one call. Stage results
use a small Result type so that per-stage failures are values, not
exceptions, when they reach the orchestrator.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
from types import MappingProxyType
import typing

if typing.TYPE_CHECKING:
    from structgen.core.schema import SchemaDescriptor

type JSONScalar = str | int | float | bool | None
type JSONValue = JSONScalar | list[JSONValue] | dict[str, JSONValue]

# --- Minimal guard helpers ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _freeze_mapping(m: Mapping[str, typing.Any] | None) -> Mapping[str, typing.Any]:
    if m is None:
        return MappingProxyType({})
    if isinstance(m, MappingProxyType):
        return m
    return MappingProxyType(dict(m))


# --- Result type ---

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful outcome."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A failed outcome, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]


# --- Call-level types ---


@dataclasses.dataclass(frozen=True, slots=True)
class GenerationRequest:
    """One request to a provider adapter.

    Attributes:
        system_prompt: Instruction text for the model's system role.
        user_prompt: The task-specific prompt.
        schema: Expected output shape, or None for free text.
        temperature: Sampling temperature.
        seed: Optional determinism seed forwarded to backends that accept one.
    """

    system_prompt: str
    user_prompt: str
    schema: SchemaDescriptor | None = None
    temperature: float = 0.7
    seed: int | None = None

    def __post_init__(self) -> None:
        """Validate request invariants."""
        _require(
            condition=isinstance(self.system_prompt, str),
            message="must be str",
            field_name="system_prompt",
            exc=TypeError,
        )
        _require(
            condition=isinstance(self.user_prompt, str) and self.user_prompt.strip() != "",
            message="must be a non-empty str",
            field_name="user_prompt",
        )
        _require(
            condition=isinstance(self.temperature, int | float)
            and 0.0 <= self.temperature <= 2.0,
            message=f"must be numeric within [0.0, 2.0], got {self.temperature}",
            field_name="temperature",
        )
        _require(
            condition=self.seed is None
            or (isinstance(self.seed, int) and not isinstance(self.seed, bool)),
            message="must be an int or None",
            field_name="seed",
            exc=TypeError,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class RawModelResponse:
    """Text returned by a backend plus advisory metadata.

    `truncated` is set when the provider reports that generation stopped on a
    length limit. It is only a hint: repair does not depend on it.
    """

    text: str
    truncated: bool = False
    provider_metadata: Mapping[str, typing.Any] = dataclasses.field(
        default_factory=dict
    )

    def __post_init__(self) -> None:
        """Freeze provider metadata."""
        object.__setattr__(
            self, "provider_metadata", _freeze_mapping(self.provider_metadata)
        )


# --- Pipeline types ---


@dataclasses.dataclass(frozen=True, slots=True)
class StageDefinition:
    """One independent unit of work inside an operation.

    Attributes:
        name: Stage identifier, unique within an operation.
        request: The request template issued for this stage.
        default: Value contributed when the stage fails.
        output_key: When set, the stage payload is stored under this key in the
            merged result; otherwise the payload must be an object and its
            fields are merged at the top level.
    """

    name: str
    request: GenerationRequest
    default: JSONValue
    output_key: str | None = None

    def __post_init__(self) -> None:
        """Validate stage invariants."""
        _require(
            condition=isinstance(self.name, str) and self.name.strip() != "",
            message="must be a non-empty str",
            field_name="name",
        )
        _require(
            condition=self.output_key is not None or isinstance(self.default, dict),
            message="must be an object when output_key is not set",
            field_name="default",
            exc=TypeError,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class StageResult:
    """Settled outcome of one stage.

    `outcome` records what happened; `value` is what the stage contributes to
    the merged result (the payload on success, the declared default on
    failure).
    """

    stage: str
    outcome: Result[JSONValue, Exception]
    value: JSONValue
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        """True when the stage produced its own payload."""
        return isinstance(self.outcome, Success)

    @property
    def reason(self) -> str | None:
        """Failure reason, or None for successful stages."""
        if isinstance(self.outcome, Failure):
            return f"{type(self.outcome.error).__name__}: {self.outcome.error}"
        return None


@dataclasses.dataclass(frozen=True, slots=True)
class PipelineResult:
    """Merged, normalized output of one logical operation.

    Attributes:
        operation: Name of the operation that produced this result.
        data: The merged payload; every required field is present.
        stages: Per-stage outcomes in declaration order.
        metrics: Timing and counters collected while running.
    """

    operation: str
    data: dict[str, JSONValue]
    stages: tuple[StageResult, ...] = ()
    metrics: Mapping[str, typing.Any] = dataclasses.field(default_factory=dict)

    @property
    def degraded(self) -> bool:
        """True when at least one stage fell back to its default."""
        return any(not s.ok for s in self.stages)

    @property
    def failed_stages(self) -> tuple[str, ...]:
        """Names of stages that contributed their default value."""
        return tuple(s.stage for s in self.stages if not s.ok)

    def __getitem__(self, key: str) -> JSONValue:
        """Shortcut for `result.data[key]`."""
        return self.data[key]
