"""The HTTP transport shared by all adapters.

One small wrapper over `httpx.AsyncClient` posts JSON and returns decoded
JSON, translating every failure mode into `TransportError`. Tests inject an
`httpx.MockTransport` through the `transport` argument.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from structgen.constants import NETWORK_TIMEOUT, RAW_PREVIEW_CHARS
from structgen.core.exceptions import TransportError

log = logging.getLogger(__name__)


class HttpTransport:
    """Posts JSON bodies and decodes JSON replies."""

    def __init__(
        self,
        *,
        timeout: float = NETWORK_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create a transport.

        Args:
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport, e.g. `httpx.MockTransport`.
        """
        self.timeout = timeout
        self._transport = transport

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        *,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """POST `payload` to `url` and return the decoded JSON object.

        Raises:
            TransportError: On network failure, timeout, a non-success status
                or a body that is not a JSON object.
        """
        # A client per call keeps the transport independent of any one event loop.
        async with httpx.AsyncClient(
            transport=self._transport, timeout=self.timeout
        ) as client:
            try:
                response = await client.post(url, json=payload, headers=headers)
            except httpx.TimeoutException as e:
                raise TransportError(f"Request to {url} timed out after {self.timeout}s") from e
            except httpx.HTTPError as e:
                raise TransportError(f"Request to {url} failed: {e}") from e

        if not response.is_success:
            preview = response.text[:RAW_PREVIEW_CHARS]
            raise TransportError(
                f"API Error ({response.status_code}): {preview}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(
                f"Response body is not JSON: {response.text[:RAW_PREVIEW_CHARS]!r}",
                status_code=response.status_code,
            ) from e

        if not isinstance(body, dict):
            raise TransportError(
                f"Expected a JSON object, got {type(body).__name__}",
                status_code=response.status_code,
            )
        log.debug("POST %s -> %d", url, response.status_code)
        return body
