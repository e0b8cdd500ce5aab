"""
Base class for the external AI service clients

Each client is a thin async wrapper over one HTTP endpoint. Transport errors,
HTTP error statuses and service-level error codes all surface as
``BoundaryCallError`` so pipeline components have a single failure to handle.
"""

from typing import Any, Dict, Optional

import httpx

from ...core import BoundaryCallError, get_logger

logger = get_logger(__name__, component="service_client")


class HttpServiceClient:
    """Shared request plumbing for the service clients.

    Args:
        timeout: Request timeout in seconds
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``)
    """

    service_name = "service"

    def __init__(self, timeout: float = 120.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def _post(self, url: str, payload: Dict[str, Any], headers: Dict[str, str]) -> httpx.Response:
        """POST JSON; raise ``BoundaryCallError`` on transport failures or error statuses."""
        try:
            async with self._client() as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"{self.service_name} request failed", extra={"url": url, "error": str(e)})
            raise BoundaryCallError(self.service_name, f"request failed: {e}") from e

        if response.is_error:
            body = response.text[:500]
            logger.error(f"{self.service_name} returned HTTP {response.status_code}", extra={
                "url": url,
                "status_code": response.status_code,
                "body": body,
            })
            raise BoundaryCallError(self.service_name, body or response.reason_phrase, response.status_code)

        return response

    def _json(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise BoundaryCallError(self.service_name, "response is not JSON", response.status_code) from e
        if not isinstance(data, dict):
            raise BoundaryCallError(self.service_name, "unexpected response shape", response.status_code)
        return data
