"""Exception hierarchy for structured generation.

Stage-level errors (`TransportError`, `EmptyResponseError`,
`UnrepairableError`) are caught at the pipeline boundary and turned into
`Failure` values. Only configuration-level errors reach a caller of
`run_operation`.
"""


class StructGenError(Exception):
    """Base exception for all structgen errors"""  # noqa: D415


class ConfigurationError(StructGenError):
    """Raised when configuration is invalid or incomplete"""  # noqa: D415


class MissingCredentialError(ConfigurationError):
    """Raised when no credential is configured for the selected provider"""  # noqa: D415


class TransportError(StructGenError):
    """Raised when a remote call cannot complete.

    Covers network failures, timeouts and non-success HTTP status codes.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialize with a message and the optional HTTP status code."""
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(StructGenError):
    """Raised when the backend replies without usable content"""  # noqa: D415


class UnrepairableError(StructGenError):
    """Raised when a payload still fails to parse after repair.

    Internal only: the pipeline converts it into a failed stage so the
    normalizer can substitute schema defaults.
    """

    def __init__(self, message: str, *, repaired_text: str = "") -> None:
        """Initialize with a message and the text that failed to parse."""
        super().__init__(message)
        self.repaired_text = repaired_text


class UnknownOperationError(StructGenError):
    """Raised when an operation name is not in the catalog"""  # noqa: D415


class InvalidInputError(StructGenError):
    """Raised when an operation is missing a required input"""  # noqa: D415
