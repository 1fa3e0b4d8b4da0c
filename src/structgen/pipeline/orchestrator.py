"""Concurrent, bulkheaded execution of independent stages.

Every stage of an operation is dispatched at once with `asyncio.gather`.
A stage that raises, times out or yields an unusable payload becomes a
`Failure` carrying its declared default; its siblings are unaffected. The
merged payload is then normalized against the operation's result schema.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
import copy
import logging
import time
from typing import Any

from structgen.adapters.base import GenerationAdapter
from structgen.constants import STAGE_TIMEOUT
from structgen.core.exceptions import UnrepairableError
from structgen.core.schema import ArraySchema, ObjectSchema
from structgen.core.types import (
    Failure,
    JSONValue,
    PipelineResult,
    StageDefinition,
    StageResult,
    Success,
)
from structgen.response import parse_structured
from structgen.telemetry import TelemetryContext, TelemetryContextProtocol

from .normalizer import normalize

log = logging.getLogger(__name__)


class StagePipeline:
    """Runs stage definitions against one adapter and merges the results."""

    def __init__(
        self,
        adapter: GenerationAdapter,
        *,
        stage_timeout: float = STAGE_TIMEOUT,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        """Create a pipeline.

        Args:
            adapter: Backend used for every stage.
            stage_timeout: Seconds after which a stage counts as failed.
            telemetry: Optional telemetry context; defaults to a no-op one.
        """
        self.adapter = adapter
        self.stage_timeout = stage_timeout
        self._tele = telemetry or TelemetryContext()

    async def run(
        self,
        stages: Sequence[StageDefinition],
        *,
        operation: str = "anonymous",
        schema: ObjectSchema | None = None,
    ) -> PipelineResult:
        """Execute `stages` concurrently and return the merged result.

        Args:
            stages: Independent stages; names must be unique.
            operation: Name recorded on the result and in logs.
            schema: Result schema the merged payload is normalized against.

        Returns:
            A PipelineResult whose `data` contains every stage contribution.
            Per-stage errors never propagate out of this method.
        """
        names = [s.name for s in stages]
        if len(set(names)) != len(names):
            raise ValueError(f"Stage names must be unique, got {names}")

        start = time.perf_counter()
        # Create every coroutine before awaiting any of them.
        pending = [self._run_stage(stage) for stage in stages]
        results: list[StageResult] = list(await asyncio.gather(*pending))
        elapsed = time.perf_counter() - start

        merged: dict[str, JSONValue] = {}
        for stage, result in zip(stages, results, strict=True):
            _merge(merged, stage, result.value)

        data = normalize(merged, schema) if schema is not None else merged

        failed = [r.stage for r in results if not r.ok]
        if failed:
            log.warning(
                "Operation '%s' degraded: %d/%d stage(s) used defaults (%s)",
                operation,
                len(failed),
                len(results),
                ", ".join(failed),
            )

        metrics: dict[str, Any] = {
            "total_duration_s": elapsed,
            "stage_durations": {r.stage: r.duration for r in results},
            "failed_stages": len(failed),
        }
        return PipelineResult(
            operation=operation,
            data=data,  # type: ignore[arg-type]
            stages=tuple(results),
            metrics=metrics,
        )

    async def _run_stage(self, stage: StageDefinition) -> StageResult:
        start = time.perf_counter()
        with self._tele("pipeline.stage", stage=stage.name):
            try:
                async with asyncio.timeout(self.stage_timeout):
                    raw = await self.adapter.generate(stage.request)
                payload = _payload_for(stage, raw.text, self._tele)
                outcome: Success[JSONValue] | Failure[Exception] = Success(payload)
                value = payload
            except Exception as e:  # Stage boundary: failures become values
                log.warning(
                    "Stage '%s' failed (%s: %s); using its default",
                    stage.name,
                    type(e).__name__,
                    e,
                )
                self._tele.count("pipeline.stage_failed", stage=stage.name)
                outcome = Failure(e)
                value = copy.deepcopy(stage.default)

        return StageResult(
            stage=stage.name,
            outcome=outcome,
            value=value,
            duration=time.perf_counter() - start,
        )


def _payload_for(
    stage: StageDefinition, text: str, tele: TelemetryContextProtocol
) -> JSONValue:
    """Parse raw stage text into the value the stage contributes."""
    schema = stage.request.schema
    if schema is None:
        if stage.output_key is None:
            raise UnrepairableError(f"Free-text stage '{stage.name}' needs an output_key")
        return text.strip()

    payload = parse_structured(text, telemetry=tele)

    if isinstance(schema, ArraySchema) and isinstance(payload, dict):
        payload = _unwrap_array(stage, payload)

    if stage.output_key is None and not isinstance(payload, dict):
        raise UnrepairableError(
            f"Stage '{stage.name}' expected a JSON object, got {type(payload).__name__}"
        )
    return payload


def _unwrap_array(stage: StageDefinition, payload: dict[str, Any]) -> JSONValue:
    """Extract the list from an object-wrapped array payload.

    JSON mode on OpenAI-compatible backends only emits objects, so array
    stages often come back as ``{"items": [...]}``.
    """
    if stage.output_key and isinstance(payload.get(stage.output_key), list):
        return payload[stage.output_key]
    lists = [v for v in payload.values() if isinstance(v, list)]
    if len(lists) == 1:
        return lists[0]
    raise UnrepairableError(
        f"Stage '{stage.name}' expected a JSON array, got an object with keys {sorted(payload)}"
    )


def _merge(merged: dict[str, JSONValue], stage: StageDefinition, value: JSONValue) -> None:
    """Store a stage's contribution; an object stage only owns its declared fields."""
    if stage.output_key is not None:
        merged[stage.output_key] = value
        return
    if not isinstance(value, dict):
        return
    schema = stage.request.schema
    if isinstance(schema, ObjectSchema):
        stray = sorted(set(value) - set(schema.properties))
        if stray:
            log.debug("Stage '%s' dropped undeclared field(s): %s", stage.name, stray)
        value = {k: v for k, v in value.items() if k in schema.properties}
    merged.update(value)
