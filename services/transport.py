"""HTTP transport backed by httpx."""

import logging

import httpx

from core.request_types import JsonRequest, TransportResponse

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Send JSON requests through a shared ``httpx.AsyncClient``."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, request: JsonRequest) -> TransportResponse:
        """Execute the request; any received response is returned whatever its status."""
        req = self._client.build_request(
            request.method,
            request.url,
            headers=dict(request.headers),
            content=request.body,
        )
        try:
            response = await self._client.send(req)
        except httpx.RequestError as e:
            logger.debug("%s %s failed: %r", request.method, request.url, e)
            return TransportResponse(error=e)

        logger.debug("%s %s -> %s", request.method, request.url, response.status_code)
        return TransportResponse(
            status_code=response.status_code,
            content=response.content,
        )
