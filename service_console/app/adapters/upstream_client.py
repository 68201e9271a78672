"""
Upstream API client for the console gateway.
"""

from typing import Dict, Optional

import httpx

from shared.config import BaseConfig
from shared.errors import TransportError
from shared.logging import get_logger


def create_http_client(config: BaseConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Build the shared outbound HTTP client for one deployment."""
    kwargs = {}
    if config.upstream_timeout_seconds is not None:
        kwargs["timeout"] = config.upstream_timeout_seconds
    if transport is not None:
        kwargs["transport"] = transport
    return httpx.AsyncClient(**kwargs)


class UpstreamClient:
    """Client for communicating with the upstream API."""

    def __init__(self, base_url: str, http_client: httpx.AsyncClient):
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client
        self.logger = get_logger("console.upstream_client")

    def url_for(self, path: str) -> str:
        """Join an upstream path onto the configured base URL."""
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.base_url}{path}"

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        content: Optional[bytes] = None,
    ) -> httpx.Response:
        """Send one request upstream; transport failures become TransportError."""
        try:
            return await self.http_client.request(
                method,
                url,
                headers=headers,
                content=content,
            )
        except httpx.RequestError as e:
            self.logger.error(
                "Upstream request failed",
                method=method,
                url=url,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise TransportError(details={"error_type": type(e).__name__})

    async def post_json(self, path: str, payload: Dict[str, object]) -> httpx.Response:
        """POST a JSON document to an upstream path."""
        try:
            return await self.http_client.post(self.url_for(path), json=payload)
        except httpx.RequestError as e:
            self.logger.error(
                "Upstream request failed",
                method="POST",
                path=path,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise TransportError(details={"error_type": type(e).__name__})

    async def close(self):
        await self.http_client.aclose()
