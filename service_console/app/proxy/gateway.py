"""
Catch-all proxy from the browser to the upstream API.

The httpOnly credential cookie is read here and turned into a bearer
header, so page scripts never need the token. Payloads are forwarded
byte-for-byte; upstream statuses, including 401/403/5xx, reach the caller
unchanged.
"""

from typing import Dict, Optional

from fastapi import Request, Response

from shared.base_service import forwarded_for_chain
from shared.errors import AuthorizationError, TransportError
from shared.logging import get_logger, mask_token
from shared.metrics import MetricsCollector

from ..adapters.upstream_client import UpstreamClient
from ..domain.credentials import read_credential
from .relay import decode_relay_body, render_relay
from .route import ProxyRoute

PROXY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]
BODYLESS_METHODS = frozenset({"GET", "HEAD"})


class ProxyGateway:
    """Forwards one inbound request upstream and relays the answer."""

    def __init__(self, upstream: UpstreamClient, metrics: Optional[MetricsCollector] = None):
        self.upstream = upstream
        self.metrics = metrics
        self.logger = get_logger("console.proxy")

    def build_headers(self, token: str, forwarded_for: Optional[str]) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }
        if forwarded_for:
            headers["X-Forwarded-For"] = forwarded_for
        return headers

    async def forward(self, request: Request, path: str) -> Response:
        method = request.method.upper()
        route = ProxyRoute.from_path(path, request.url.query)
        target_url = route.target_url(self.upstream.base_url)

        token = read_credential(request)
        if not token:
            self.logger.warning("Proxy request without credential", method=method, path=route.upstream_path)
            raise AuthorizationError()

        headers = self.build_headers(token, forwarded_for_chain(request))

        content = None
        if method not in BODYLESS_METHODS:
            content = await request.body() or None

        self.logger.info(
            "Proxying request",
            method=method,
            target_url=target_url,
            token=mask_token(token),
        )

        try:
            upstream_response = await self._send(method, target_url, headers, content)
        except TransportError as e:
            self._record_failure(e.details.get("error_type", "unknown"))
            raise

        self.logger.info(
            "Upstream responded",
            method=method,
            target_url=target_url,
            status_code=upstream_response.status_code,
        )
        if self.metrics:
            self.metrics.increment_counter(
                "proxy_requests_total",
                method=method,
                status_code=str(upstream_response.status_code),
            )

        body = decode_relay_body(upstream_response.headers.get("content-type", ""), upstream_response.text)
        return render_relay(body, upstream_response.status_code)

    async def _send(self, method: str, target_url: str, headers: Dict[str, str], content: Optional[bytes]):
        if not self.metrics:
            return await self.upstream.request(method, target_url, headers=headers, content=content)
        with self.metrics.time_operation("proxy_upstream_duration_seconds", method=method):
            return await self.upstream.request(method, target_url, headers=headers, content=content)

    def _record_failure(self, reason: str):
        if self.metrics:
            self.metrics.increment_counter("proxy_upstream_failures_total", reason=reason)
