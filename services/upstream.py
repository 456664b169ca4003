"""HTTP client wrapper for the upstream API."""

import httpx

from core.exceptions import UpstreamConnectionError, UpstreamTimeoutError
from core.request_types import PreparedRequest


class UpstreamClient:
    """Send prepared requests upstream and buffer the response."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, prepared: PreparedRequest) -> httpx.Response:
        """Issue the request, translating transport failures to proxy errors."""
        try:
            return await self._client.request(
                prepared.method,
                prepared.target_url,
                headers=prepared.headers,
                content=prepared.body,
            )
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(f"Upstream timeout: {_describe(e)}") from e
        except httpx.RequestError as e:
            raise UpstreamConnectionError(_describe(e)) from e


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__
