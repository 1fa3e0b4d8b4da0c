"""Resilient structured generation over unreliable LLM backends."""

import importlib.metadata
import logging

from structgen.config import FrozenConfig, ResolvedConfig, resolve_config
from structgen.core.exceptions import (
    ConfigurationError,
    EmptyResponseError,
    InvalidInputError,
    MissingCredentialError,
    StructGenError,
    TransportError,
    UnknownOperationError,
    UnrepairableError,
)
from structgen.core.schema import (
    ArraySchema,
    ObjectSchema,
    Primitive,
    SchemaDescriptor,
    array_of,
    boolean,
    number,
    object_of,
    string,
)
from structgen.core.types import (
    Failure,
    GenerationRequest,
    PipelineResult,
    RawModelResponse,
    Result,
    StageDefinition,
    StageResult,
    Success,
)
from structgen.executor import OperationExecutor, create_executor
from structgen.frontdoor import run_operation
from structgen.operations import get_operation, list_operations
from structgen.pipeline import StagePipeline, normalize
from structgen.response import parse_structured, repair, sanitize
from structgen.telemetry import TelemetryContext, TelemetryReporter

# Version handling
try:
    __version__ = importlib.metadata.version("structgen")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Entry points
    "run_operation",
    "OperationExecutor",
    "create_executor",
    "get_operation",
    "list_operations",
    # Configuration
    "resolve_config",
    "FrozenConfig",
    "ResolvedConfig",
    # Schema descriptors
    "SchemaDescriptor",
    "Primitive",
    "ArraySchema",
    "ObjectSchema",
    "string",
    "number",
    "boolean",
    "array_of",
    "object_of",
    # Pipeline building blocks
    "StagePipeline",
    "StageDefinition",
    "StageResult",
    "PipelineResult",
    "GenerationRequest",
    "RawModelResponse",
    "normalize",
    "sanitize",
    "repair",
    "parse_structured",
    # Result types
    "Result",
    "Success",
    "Failure",
    # Telemetry
    "TelemetryContext",
    "TelemetryReporter",
    # Exceptions
    "StructGenError",
    "ConfigurationError",
    "MissingCredentialError",
    "TransportError",
    "EmptyResponseError",
    "UnrepairableError",
    "UnknownOperationError",
    "InvalidInputError",
]
