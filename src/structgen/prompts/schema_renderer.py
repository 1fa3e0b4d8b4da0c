"""Render schema descriptors as a JSON-like example a model can imitate.

Used by prompt-coerced backends, which have no native structured-output
mode. The rendering is a mock of the expected structure, e.g.::

    {
      "status": "one of: valid | weak", // verdict
      "tags": [
        "string"
      ]
    }

Enumerations are spelled out as a closed list of literal choices because
models follow exact allowed values far more reliably than a generic
placeholder.
"""

from __future__ import annotations

import logging

from structgen.core.schema import ArraySchema, ObjectSchema, Primitive, SchemaDescriptor

log = logging.getLogger(__name__)

INDENT = "  "
PLACEHOLDER = '"unknown"'
MAX_DEPTH = 32


def render(schema: SchemaDescriptor) -> str:
    """Render `schema` as an indented structural example.

    Never raises: unrecognized shapes render as a placeholder token.
    """
    try:
        text, comment = _render(schema, 0)
    except (TypeError, AttributeError, ValueError, RecursionError) as e:
        log.debug("Schema rendering fell back to placeholder: %s", e)
        return PLACEHOLDER
    return f"{text} // {comment}" if comment else text


def _render(schema: object, depth: int) -> tuple[str, str | None]:
    """Return the example text for `schema` and its trailing comment."""
    if depth > MAX_DEPTH:
        return PLACEHOLDER, None

    indent = INDENT * depth
    inner = INDENT * (depth + 1)

    match schema:
        case Primitive(kind="string", enum=enum, description=description):
            if enum:
                return f'"one of: {" | ".join(enum)}"', description
            return '"string"', description
        case Primitive(kind="number", description=description, minimum=lo, maximum=hi):
            return "0", _with_range(description, lo, hi)
        case Primitive(kind="boolean", description=description):
            return "false", description
        case ArraySchema(items=items, description=description):
            item_text, item_comment = _render(items, depth + 1)
            line = f"{inner}{item_text}"
            if item_comment:
                line += f" // {item_comment}"
            return f"[\n{line}\n{indent}]", description
        case ObjectSchema(properties=properties, description=description):
            if not properties:
                return "{}", description
            lines: list[str] = []
            names = list(properties)
            for i, name in enumerate(names):
                value_text, value_comment = _render(properties[name], depth + 1)
                line = f'{inner}"{name}": {value_text}'
                if i < len(names) - 1:
                    line += ","
                if value_comment:
                    line += f" // {value_comment}"
                lines.append(line)
            return "{\n" + "\n".join(lines) + f"\n{indent}}}", description
    return PLACEHOLDER, None


def _with_range(description: str | None, lo: float | None, hi: float | None) -> str | None:
    if lo is None and hi is None:
        return description
    if lo is not None and hi is not None:
        bounds = f"between {lo:g} and {hi:g}"
    elif lo is not None:
        bounds = f">= {lo:g}"
    else:
        bounds = f"<= {hi:g}"
    return f"{description} ({bounds})" if description else bounds
