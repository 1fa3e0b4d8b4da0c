"""Protocol implemented by every provider adapter."""

from typing import Protocol, runtime_checkable

from structgen.core.types import GenerationRequest, RawModelResponse


@runtime_checkable
class GenerationAdapter(Protocol):
    """One backend family behind a uniform text-generation call.

    Implementations raise `TransportError` when the remote call cannot
    complete and `EmptyResponseError` when the reply carries no usable text.
    """

    native_schema: bool

    async def generate(self, request: GenerationRequest) -> RawModelResponse:
        """Issue one generation call.

        Args:
            request: Prompts, optional output schema and sampling settings.

        Returns:
            The backend's text plus advisory metadata.
        """
        ...
