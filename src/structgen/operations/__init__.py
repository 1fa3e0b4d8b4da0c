"""Named writing-coach operations and their stage decompositions."""

from .catalog import (
    OPERATIONS,
    OperationDefinition,
    StageSpec,
    get_operation,
    list_operations,
)

__all__ = [
    "OPERATIONS",
    "OperationDefinition",
    "StageSpec",
    "get_operation",
    "list_operations",
]
