"""Strip non-JSON decoration from raw model output.

Models, especially prompt-coerced ones, like to wrap structured output in
markdown fences or surround it with chatter. `sanitize` removes that framing
without trying to validate what is left.
"""

import re

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?([\s\S]*?)\n?```", re.IGNORECASE)

_OPENERS = "{["
_CLOSERS = "}]"


def sanitize(text: str) -> str:
    """Return the JSON-looking core of `text`.

    Applied in order:

    1. A fenced code block keeps only its interior.
    2. Text not starting with ``{``/``[`` loses everything before the first one.
    3. Text not ending with ``}``/``]`` loses everything after the last one.

    Deterministic, total and idempotent.
    """
    if not text:
        return ""

    cleaned = text.strip()

    fence = _FENCE_RE.search(cleaned)
    if fence:
        cleaned = fence.group(1).strip()

    if cleaned and cleaned[0] not in _OPENERS:
        starts = [i for i in (cleaned.find(c) for c in _OPENERS) if i >= 0]
        if starts:
            cleaned = cleaned[min(starts) :]

    if cleaned and cleaned[-1] not in _CLOSERS:
        end = max(cleaned.rfind(c) for c in _CLOSERS)
        if end >= 0:
            cleaned = cleaned[: end + 1]

    return cleaned
