"""Best-effort repair of JSON cut off by an output-length limit.

Truncated generations are the most common structural failure. The repair
never invents values: it closes what was left open and drops a trailing
member that has no value yet.

1. String closure: an unterminated string gets its closing quote (a dangling
   escape sequence is dropped first).
2. Dangling-member removal: trailing commas, colons, keys without values and
   partial literals (``tru``, ``-``, ``1e``) are removed.
3. Bracket closure: every container still open is closed, innermost first.

The output always parses. When nothing salvageable remains it is ``{}``
(or ``[]`` for array payloads).
"""

from __future__ import annotations

import json
import logging
import re
import typing

log = logging.getLogger(__name__)

_STRUCTURAL = frozenset("{}[]:,")
_PAIRS = {"}": "{", "]": "["}
_CLOSER_FOR = {"{": "}", "[": "]"}
_COMPLETE_LITERAL = re.compile(
    r"true|false|null|-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?"
)


class _Token(typing.NamedTuple):
    kind: str
    start: int
    end: int


def repair(text: str) -> str:
    """Return a parseable JSON document salvaged from `text`."""
    stripped = text.strip()
    fallback = "[]" if stripped.startswith("[") else "{}"
    if not stripped:
        return fallback

    closed = close_string(stripped)
    tokens = _drop_dangling(closed, _tokenize(closed))
    if not tokens:
        return fallback

    body = closed[: tokens[-1].end]
    repaired = body + "".join(_CLOSER_FOR[c] for c in reversed(_open_stack(tokens)))

    try:
        json.loads(repaired, strict=False)
    except ValueError:
        log.debug("Repair produced unparseable text; using %s", fallback)
        return fallback
    return repaired


def close_string(text: str) -> str:
    """Terminate an unterminated string literal at the end of `text`."""
    in_string = False
    escape_at: int | None = None
    i = 0
    while i < len(text):
        ch = text[i]
        if in_string and ch == "\\":
            escape_at = i
            i += 2
            continue
        if ch == '"':
            in_string = not in_string
        i += 1

    if not in_string:
        return text

    # Drop an escape sequence cut short: "\" or "\u12".
    if escape_at is not None:
        tail = text[escape_at:]
        if tail == "\\" or (tail.startswith("\\u") and len(tail) < 6):
            text = text[:escape_at]
    return text + '"'


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
        elif ch in _STRUCTURAL:
            tokens.append(_Token(ch, i, i + 1))
            i += 1
        elif ch == '"':
            j = i + 1
            while j < n and text[j] != '"':
                j += 2 if text[j] == "\\" else 1
            end = min(j + 1, n)
            tokens.append(_Token("string", i, end))
            i = end
        else:
            j = i
            while j < n and not text[j].isspace() and text[j] not in _STRUCTURAL and text[j] != '"':
                j += 1
            tokens.append(_Token("literal", i, j))
            i = j
    return tokens


def _open_stack(tokens: typing.Sequence[_Token]) -> list[str]:
    stack: list[str] = []
    for tok in tokens:
        if tok.kind in _CLOSER_FOR:
            stack.append(tok.kind)
        elif tok.kind in _PAIRS and stack and stack[-1] == _PAIRS[tok.kind]:
            stack.pop()
    return stack


def _is_key(tokens: list[_Token]) -> bool:
    """True when the last token sits where an object key is expected."""
    stack = _open_stack(tokens[:-1])
    if not stack or stack[-1] != "{":
        return False
    previous = tokens[-2].kind if len(tokens) > 1 else None
    return previous in ("{", ",")


def _drop_dangling(text: str, tokens: list[_Token]) -> list[_Token]:
    tokens = list(tokens)
    while tokens:
        last = tokens[-1]
        if last.kind in (",", ":"):
            tokens.pop()
        elif last.kind == "literal" and not _COMPLETE_LITERAL.fullmatch(
            text[last.start : last.end]
        ):
            tokens.pop()
        elif last.kind in ("string", "literal") and _is_key(tokens):
            tokens.pop()
        else:
            break
    return tokens
