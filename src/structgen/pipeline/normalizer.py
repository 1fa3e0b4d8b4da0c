"""Result normalization: make every required field present and well-typed.

The normalizer is the terminal safety net of the pipeline. Whatever the
backend produced (or failed to produce), the output of `normalize` conforms
structurally to its schema:

- required fields that are absent, of the wrong kind, or outside a declared
  enumeration get a type-appropriate default;
- numbers are clamped into ``[minimum, maximum]``;
- array elements of the wrong kind are dropped;
- unknown extra fields are preserved untouched.

Semantic correctness is out of reach and not attempted.
"""

from __future__ import annotations

import math

from structgen.core.schema import ArraySchema, ObjectSchema, Primitive, SchemaDescriptor
from structgen.core.types import JSONValue


def default_for(schema: SchemaDescriptor) -> JSONValue:
    """Deterministic fallback value for `schema`."""
    match schema:
        case Primitive(default=default) if default is not None:
            return default
        case Primitive(kind="string"):
            return ""
        case Primitive(kind="number", minimum=lo, maximum=hi):
            return _clamp(0, lo, hi)
        case Primitive(kind="boolean"):
            return False
        case ArraySchema():
            return []
        case ObjectSchema(properties=properties, required=required):
            return {
                name: default_for(sub)
                for name, sub in properties.items()
                if name in required
            }
    raise TypeError(f"Unsupported schema descriptor: {type(schema).__name__}")


def normalize(value: JSONValue, schema: SchemaDescriptor) -> JSONValue:
    """Return `value` coerced to conform structurally to `schema`.

    Never mutates `value`.
    """
    match schema:
        case ObjectSchema(properties=properties, required=required):
            if not isinstance(value, dict):
                return default_for(schema)
            out = dict(value)
            for name, sub in properties.items():
                if name in value:
                    out[name] = normalize(value[name], sub)
                elif name in required:
                    out[name] = default_for(sub)
            return out
        case ArraySchema(items=items):
            if not isinstance(value, list):
                return []
            return [normalize(v, items) for v in value if _same_kind(v, items)]
        case Primitive():
            return _normalize_primitive(value, schema)
    raise TypeError(f"Unsupported schema descriptor: {type(schema).__name__}")


def _normalize_primitive(value: JSONValue, schema: Primitive) -> JSONValue:
    if not _same_kind(value, schema):
        return default_for(schema)
    if schema.kind == "number":
        return _clamp(value, schema.minimum, schema.maximum)  # type: ignore[arg-type]
    if schema.enum is not None:
        if value in schema.enum:
            return value
        # Accept case variants, returning the declared literal.
        folded = {literal.casefold(): literal for literal in schema.enum}
        return folded.get(str(value).strip().casefold(), default_for(schema))
    return value


def _same_kind(value: JSONValue, schema: SchemaDescriptor) -> bool:
    match schema:
        case ObjectSchema():
            return isinstance(value, dict)
        case ArraySchema():
            return isinstance(value, list)
        case Primitive(kind="string"):
            return isinstance(value, str)
        case Primitive(kind="boolean"):
            return isinstance(value, bool)
        case Primitive(kind="number"):
            if isinstance(value, bool) or not isinstance(value, int | float):
                return False
            return not isinstance(value, float) or math.isfinite(value)
    return False


def _clamp(value: float, lo: float | None, hi: float | None) -> float:
    if lo is not None and value < lo:
        return lo
    if hi is not None and value > hi:
        return hi
    return value
