"""Turn raw model text into structured data.

Sanitize, try a direct parse, and only when that fails run the truncation
repair. Callers get parsed JSON or an `UnrepairableError`.
"""

from __future__ import annotations

import json
import logging

from structgen.constants import RAW_PREVIEW_CHARS
from structgen.core.exceptions import UnrepairableError
from structgen.core.types import JSONValue
from structgen.telemetry import TelemetryContext, TelemetryContextProtocol

from .repair import repair
from .sanitizer import sanitize

log = logging.getLogger(__name__)


def parse_structured(
    text: str,
    *,
    telemetry: TelemetryContextProtocol | None = None,
) -> JSONValue:
    """Parse `text` as JSON, repairing truncation when needed.

    Raises:
        UnrepairableError: When there is no JSON content, or repair could
            not salvage any of it.
    """
    tele = telemetry or TelemetryContext()
    cleaned = sanitize(text)
    if not cleaned:
        raise UnrepairableError("Response contained no JSON content")

    try:
        return json.loads(cleaned, strict=False)
    except ValueError as e:
        log.warning("Direct JSON parse failed (%s); attempting repair", e)
        log.debug("Unparseable response preview: %r", cleaned[:RAW_PREVIEW_CHARS])

    repaired = repair(cleaned)
    tele.count("response.repaired")
    try:
        value = json.loads(repaired, strict=False)
    except ValueError as e:
        raise UnrepairableError(
            f"Repaired response is still not valid JSON: {e}", repaired_text=repaired
        ) from e

    if value in ({}, []):
        raise UnrepairableError(
            f"Repair salvaged no content from a {len(cleaned)}-char response",
            repaired_text=repaired,
        )
    return value
