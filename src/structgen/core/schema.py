"""Declarative schema descriptors for structured generation.

A schema descriptor is a closed tagged variant over three immutable shapes:
`Primitive`, `ArraySchema` and `ObjectSchema`. Descriptors are pure data and
are consumed by explicit recursive `match` statements (renderer, provider
schema conversion, normalizer). They are built once per operation type and
shared read-only across concurrent calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import dataclasses
import math
from types import MappingProxyType
import typing

PrimitiveKind = typing.Literal["string", "number", "boolean"]

_KINDS: tuple[str, ...] = ("string", "number", "boolean")


@dataclasses.dataclass(frozen=True, slots=True)
class Primitive:
    """A scalar field: string, number or boolean.

    Attributes:
        kind: The primitive kind.
        enum: Closed set of allowed string literals, if any.
        description: Human-readable hint shown to the model.
        minimum: Inclusive lower bound for numbers.
        maximum: Inclusive upper bound for numbers.
        default: Explicit fallback value; `None` means the kind default.
    """

    kind: PrimitiveKind
    enum: tuple[str, ...] | None = None
    description: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    default: str | float | bool | None = None

    def __post_init__(self) -> None:
        """Validate kind-specific constraints."""
        if self.kind not in _KINDS:
            raise ValueError(f"kind: must be one of {list(_KINDS)}, got {self.kind!r}")
        if self.enum is not None:
            if self.kind != "string":
                raise ValueError("enum: only string primitives may declare an enum")
            object.__setattr__(self, "enum", tuple(self.enum))
            if not self.enum:
                raise ValueError("enum: must contain at least one literal")
        if (self.minimum is not None or self.maximum is not None) and (
            self.kind != "number"
        ):
            raise ValueError("minimum/maximum: only valid for number primitives")
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            raise ValueError(
                f"minimum/maximum: require minimum <= maximum, got {self.minimum} > {self.maximum}"
            )
        if self.default is not None:
            self._check_default(self.default)

    def _check_default(self, value: str | float | bool) -> None:
        """The explicit default must itself satisfy the descriptor."""
        match self.kind:
            case "string":
                ok = isinstance(value, str) and (self.enum is None or value in self.enum)
            case "boolean":
                ok = isinstance(value, bool)
            case _:
                ok = (
                    isinstance(value, int | float)
                    and not isinstance(value, bool)
                    and math.isfinite(value)
                    and (self.minimum is None or value >= self.minimum)
                    and (self.maximum is None or value <= self.maximum)
                )
        if not ok:
            raise ValueError(f"default: {value!r} does not satisfy this {self.kind} descriptor")


@dataclasses.dataclass(frozen=True, slots=True)
class ArraySchema:
    """An ordered sequence whose elements all follow `items`."""

    items: SchemaDescriptor
    description: str | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ObjectSchema:
    """A mapping of field names to descriptors plus the required subset."""

    properties: Mapping[str, SchemaDescriptor]
    required: frozenset[str] = frozenset()
    description: str | None = None

    def __post_init__(self) -> None:
        """Freeze properties and check that required fields are declared."""
        if not isinstance(self.properties, MappingProxyType):
            object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))
        object.__setattr__(self, "required", frozenset(self.required))
        unknown = sorted(self.required - set(self.properties))
        if unknown:
            raise ValueError(f"required: undeclared field(s) {unknown}")


type SchemaDescriptor = Primitive | ArraySchema | ObjectSchema


# --- Ergonomic constructors ---


def string(
    description: str | None = None,
    *,
    enum: Iterable[str] | None = None,
    default: str | None = None,
) -> Primitive:
    """Create a string descriptor, optionally restricted to `enum`."""
    return Primitive(
        "string",
        enum=tuple(enum) if enum is not None else None,
        description=description,
        default=default,
    )


def number(
    description: str | None = None,
    *,
    minimum: float | None = None,
    maximum: float | None = None,
    default: float | None = None,
) -> Primitive:
    """Create a number descriptor with optional inclusive bounds."""
    return Primitive(
        "number",
        description=description,
        minimum=minimum,
        maximum=maximum,
        default=default,
    )


def boolean(description: str | None = None, *, default: bool | None = None) -> Primitive:
    """Create a boolean descriptor."""
    return Primitive("boolean", description=description, default=default)


def array_of(items: SchemaDescriptor, description: str | None = None) -> ArraySchema:
    """Create an array descriptor."""
    return ArraySchema(items=items, description=description)


def object_of(
    properties: Mapping[str, SchemaDescriptor],
    required: Iterable[str] | None = None,
    description: str | None = None,
) -> ObjectSchema:
    """Create an object descriptor.

    Args:
        properties: Field name to descriptor, in display order.
        required: Required field names. Defaults to every declared field.
        description: Optional hint for the whole object.
    """
    req = frozenset(properties) if required is None else frozenset(required)
    return ObjectSchema(properties=properties, required=req, description=description)


def merge_objects(*schemas: ObjectSchema) -> ObjectSchema:
    """Merge object descriptors into one; later fields win on name clashes."""
    properties: dict[str, SchemaDescriptor] = {}
    required: set[str] = set()
    for schema in schemas:
        properties.update(schema.properties)
        required |= schema.required
    return ObjectSchema(properties=properties, required=frozenset(required))


# --- Provider conversion ---

_PROVIDER_TYPES: dict[str, str] = {
    "string": "STRING",
    "number": "NUMBER",
    "boolean": "BOOLEAN",
}


def to_provider_schema(schema: SchemaDescriptor) -> dict[str, typing.Any]:
    """Convert a descriptor to the OpenAPI-subset used for constrained decoding.

    The output is the `responseSchema` shape accepted by Gemini's
    `generateContent` endpoint. Field order is preserved through
    `propertyOrdering`.
    """
    match schema:
        case Primitive(kind=kind, enum=enum, description=description):
            out: dict[str, typing.Any] = {"type": _PROVIDER_TYPES[kind]}
            if enum is not None:
                out["enum"] = list(enum)
            if description:
                out["description"] = description
            return out
        case ArraySchema(items=items, description=description):
            out = {"type": "ARRAY", "items": to_provider_schema(items)}
            if description:
                out["description"] = description
            return out
        case ObjectSchema(properties=properties, required=required, description=description):
            out = {
                "type": "OBJECT",
                "properties": {
                    name: to_provider_schema(sub) for name, sub in properties.items()
                },
                "propertyOrdering": list(properties),
            }
            if required:
                out["required"] = [name for name in properties if name in required]
            if description:
                out["description"] = description
            return out
    raise TypeError(f"Unsupported schema descriptor: {type(schema).__name__}")
