"""Scenario-first convenience helpers over the executor."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from structgen.executor import create_executor

if TYPE_CHECKING:
    from collections.abc import Mapping

    from structgen.adapters import HttpTransport
    from structgen.config import FrozenConfig
    from structgen.core.types import PipelineResult


async def run_operation(
    name: str,
    inputs: Mapping[str, Any],
    *,
    cfg: FrozenConfig | None = None,
    transport: HttpTransport | None = None,
) -> PipelineResult:
    """Run one named operation and return its normalized result.

    Args:
        name: Operation name, e.g. ``"grade-essay"`` or ``"brainstorm"``.
        inputs: Operation inputs by name.
        cfg: Optional frozen configuration. If omitted, `resolve_config()` is used.
        transport: Optional HTTP transport, mainly for tests.

    Returns:
        PipelineResult whose `data` contains every required field. Check
        `result.degraded` to learn whether any stage fell back to defaults.

    Example:
        ```python
        result = await run_operation("brainstorm", {"topic": "Remote work"})
        for card in result["cards"]:
            print(card["dimension"])
        ```
    """
    executor = create_executor(cfg, transport)
    return await executor.execute(name, inputs)
