"""The primary user-facing entry point for running operations.

The executor owns one frozen configuration and, lazily, one provider
adapter. Everything that can be rejected up front (unknown operation,
missing inputs, missing credential) is rejected before any stage is
dispatched; after that, stage failures are values and `execute` always
returns a fully populated `PipelineResult`.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any

from structgen.adapters import GenerationAdapter, HttpTransport, create_adapter
from structgen.config import FrozenConfig, build_provider_config, resolve_config
from structgen.operations import get_operation
from structgen.pipeline import StagePipeline
from structgen.telemetry import TelemetryContext, TelemetryContextProtocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from structgen.core.types import PipelineResult

log = logging.getLogger(__name__)


class OperationExecutor:
    """Executes named operations against the configured provider."""

    def __init__(
        self,
        config: FrozenConfig,
        transport: HttpTransport | None = None,
        *,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> None:
        """Initialize the executor with configuration.

        Args:
            config: Frozen configuration for every call made by this executor.
            transport: Optional shared HTTP transport; one is built from the
                configured request timeout when omitted.
            telemetry: Optional telemetry context; no-op by default.
        """
        self.config = config
        self._transport = transport
        self._tele = telemetry or TelemetryContext()
        self._adapter: GenerationAdapter | None = None

    @property
    def adapter(self) -> GenerationAdapter:
        """The provider adapter, built on first use.

        Raises:
            MissingCredentialError: If no credential is configured.
            ConfigurationError: If the provider config is incomplete.
        """
        if self._adapter is None:
            provider_config = build_provider_config(self.config)
            self._adapter = create_adapter(provider_config, self._transport)
            log.debug("Using %r", provider_config)
        return self._adapter

    async def execute(self, name: str, inputs: Mapping[str, Any]) -> PipelineResult:
        """Run operation `name` with `inputs`.

        Args:
            name: Operation name from the catalog.
            inputs: Operation inputs by name.

        Returns:
            The normalized (and, where declared, post-processed) result.

        Raises:
            UnknownOperationError: If `name` is not cataloged.
            InvalidInputError: If a required input is missing or invalid.
            MissingCredentialError: If no credential is configured.
        """
        operation = get_operation(name)
        stages = operation.stages(inputs)
        adapter = self.adapter

        pipeline = StagePipeline(
            adapter, stage_timeout=self.config.stage_timeout, telemetry=self._tele
        )
        result = await pipeline.run(
            stages, operation=operation.name, schema=operation.result_schema
        )
        if operation.postprocess is None:
            return result
        data = operation.postprocess(result.data, inputs, result.failed_stages)
        return dataclasses.replace(result, data=data)


def create_executor(
    config: FrozenConfig | None = None,
    transport: HttpTransport | None = None,
) -> OperationExecutor:
    """Create an executor, resolving configuration when none is given.

    This is the only place where ambient configuration is resolved.
    """
    final_config = config if config is not None else resolve_config().to_frozen()
    return OperationExecutor(final_config, transport)
