"""Telemetry scopes for pipeline stages and response handling.

Disabled by default: `TelemetryContext()` returns a shared, stateless no-op
object. Set `STRUCTGEN_TELEMETRY=1` (or `DEBUG=1`) and pass at least one
reporter to get timings and counters.

Scopes nest per task through context variables, so concurrently running
stages each see their own scope path (for example
`operation.grade-essay.pipeline.stage`).
"""

from collections import defaultdict
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
import logging
import os
import time
from types import TracebackType
from typing import Any, Protocol, Self, runtime_checkable

log = logging.getLogger(__name__)

_scope_stack_var: ContextVar[tuple[str, ...]] = ContextVar("scope_stack", default=())


def _telemetry_enabled() -> bool:
    return os.getenv("STRUCTGEN_TELEMETRY") == "1" or os.getenv("DEBUG") == "1"


# Evaluated once at import time
_TELEMETRY_ENABLED = _telemetry_enabled()


@runtime_checkable
class TelemetryReporter(Protocol):
    """Duck-typed protocol for telemetry reporters."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None: ...  # noqa: D102
    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None: ...  # noqa: D102


@dataclass(frozen=True, slots=True)
class _NoOpTelemetryContext:
    """Stateless stand-in used whenever telemetry is off."""

    def __call__(self, name: str, **metadata: Any) -> Self:  # noqa: ARG002
        return self

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool | None:
        return None

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        pass

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        pass


class _EnabledTelemetryContext:
    """Context that forwards timings and metrics to its reporters."""

    __slots__ = ("reporters",)

    def __init__(self, *reporters: TelemetryReporter):
        self.reporters = reporters

    def __call__(
        self, name: str, **metadata: Any
    ) -> AbstractContextManager["_EnabledTelemetryContext"]:
        return self._scope(name, **metadata)

    @contextmanager
    def _scope(self, name: str, **metadata: Any) -> Iterator["_EnabledTelemetryContext"]:
        if not name or not isinstance(name, str):
            raise ValueError("Scope name must be a non-empty string")

        parent = _scope_stack_var.get()
        token = _scope_stack_var.set((*parent, name))
        start = time.perf_counter()
        try:
            yield self
        finally:
            duration = time.perf_counter() - start
            _scope_stack_var.reset(token)
            scope_path = ".".join((*parent, name))
            self._emit(
                "record_timing",
                scope_path,
                duration,
                depth=len(parent),
                parent_scope=".".join(parent) or None,
                **metadata,
            )

    def metric(self, name: str, value: Any, **metadata: Any) -> None:
        """Record a metric under the current scope path."""
        stack = _scope_stack_var.get()
        self._emit(
            "record_metric",
            ".".join((*stack, name)),
            value,
            depth=len(stack),
            parent_scope=".".join(stack) or None,
            **metadata,
        )

    def count(self, name: str, increment: int = 1, **metadata: Any) -> None:
        """Record a counter increment."""
        self.metric(name, increment, metric_type="counter", **metadata)

    def _emit(self, method: str, scope: str, value: Any, **metadata: Any) -> None:
        # A broken reporter must never break the call it observes.
        for reporter in self.reporters:
            try:
                getattr(reporter, method)(scope, value, **metadata)
            except Exception as e:
                log.error(
                    "Telemetry reporter '%s' failed: %s",
                    type(reporter).__name__,
                    e,
                    exc_info=True,
                )


_NO_OP_SINGLETON = _NoOpTelemetryContext()

type TelemetryContextProtocol = _EnabledTelemetryContext | _NoOpTelemetryContext


def TelemetryContext(*reporters: TelemetryReporter) -> TelemetryContextProtocol:  # noqa: N802
    """Return an enabled context, or the shared no-op one when disabled."""
    if _TELEMETRY_ENABLED and reporters:
        return _EnabledTelemetryContext(*reporters)
    return _NO_OP_SINGLETON


class InMemoryReporter:
    """Reporter that keeps everything in memory, for development and tests."""

    def __init__(self) -> None:
        self.timings: dict[str, list[float]] = defaultdict(list)
        self.metrics: dict[str, list[Any]] = defaultdict(list)

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:  # noqa: ARG002, D102
        self.timings[scope].append(duration)

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:  # noqa: ARG002, D102
        self.metrics[scope].append(value)

    def summary(self) -> str:
        """One line per scope with call counts and totals."""
        lines = ["=== Telemetry ==="]
        for scope, durations in sorted(self.timings.items()):
            lines.append(
                f"{scope:<48} | calls: {len(durations):<4} | total: {sum(durations):.4f}s"
            )
        for scope, values in sorted(self.metrics.items()):
            total = sum(v for v in values if isinstance(v, int | float))
            lines.append(f"{scope:<48} | events: {len(values):<4} | total: {total:g}")
        return "\n".join(lines)
