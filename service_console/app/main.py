"""
Admin console gateway service.

Fronts the admin UI: phone + OTP login, credential cookies, the session
gate, and the catch-all proxy to the upstream API.
"""

from typing import Optional

import httpx
from fastapi import Request
from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.errors import AccessLayerException, UnknownError
from .adapters import IdentityClient, UpstreamClient, create_http_client
from .domain import (
    CookiePolicy,
    OtpExchangeService,
    SessionGate,
    SessionGateMiddleware,
    clear_credential_cookies,
    issue_credential_cookies,
)
from .domain.otp_exchange import SEND_FAILED_MESSAGE, VERIFY_FAILED_MESSAGE, read_json_object
from .proxy import PROXY_METHODS, ProxyGateway

SERVICE_NAME = "console"
SERVICE_PORT = 3000


class ConsoleGatewayService(BaseService):
    """Console gateway service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(SERVICE_NAME, SERVICE_PORT, config)

        self.http_client = create_http_client(self.config, transport)
        self.upstream = UpstreamClient(self.config.resolved_upstream_url, self.http_client)
        self.identity_client = IdentityClient(self.upstream)
        self.otp_service = OtpExchangeService(self.identity_client, metrics=self.metrics)
        self.proxy_gateway = ProxyGateway(self.upstream, metrics=self.metrics)
        self.cookie_policy = CookiePolicy.from_config(self.config)

        @self.app.on_event("startup")
        async def _startup():
            self.logger.info(
                "Console gateway starting",
                env=self.config.env,
                upstream_environment=self.config.upstream_environment,
                upstream_base_url=self.upstream.base_url,
                cookie_secure=self.cookie_policy.secure,
            )

        @self.app.on_event("shutdown")
        async def _shutdown():
            await self.upstream.close()

        self._setup_auth_routes()
        self._setup_proxy_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.console_service = self

    def _setup_service_middleware(self):
        self.session_gate = SessionGate(
            public_paths=self.config.public_paths,
            excluded_pattern=self.config.gate_excluded_pattern,
        )
        self.app.add_middleware(SessionGateMiddleware, gate=self.session_gate, metrics=self.metrics)

    def _setup_auth_routes(self):
        """Set up login, verification and logout routes."""

        @self.app.post("/api/auth/login")
        async def request_otp(request: Request):
            """Send an OTP to an administrator's phone."""
            try:
                payload = await read_json_object(request)
                result = await self.otp_service.request_otp(payload.get("phone_number"))
            except AccessLayerException:
                raise
            except Exception as e:
                self.logger.error("OTP request handler error", error=str(e))
                raise UnknownError(SEND_FAILED_MESSAGE)

            return JSONResponse(content=result.body, status_code=result.status_code)

        @self.app.post("/api/auth/verify")
        async def verify_otp(request: Request):
            """Verify an OTP and issue the credential cookies."""
            try:
                payload = await read_json_object(request)
                verification = await self.otp_service.verify_otp(
                    payload.get("phone_number"),
                    payload.get("otp"),
                )
            except AccessLayerException:
                raise
            except Exception as e:
                self.logger.error("OTP verify handler error", error=str(e))
                raise UnknownError(VERIFY_FAILED_MESSAGE)

            response = JSONResponse(content={"success": True, "user": verification.user})
            issue_credential_cookies(response, verification.token, self.cookie_policy)
            self.logger.info("Administrator session issued")
            return response

        @self.app.post("/api/auth/logout")
        async def logout():
            """Clear both credential cookies."""
            response = JSONResponse(content={"success": True})
            clear_credential_cookies(response, self.cookie_policy)
            return response

    def _setup_proxy_routes(self):
        """Set up the catch-all upstream proxy."""

        @self.app.api_route("/api/proxy/{path:path}", methods=PROXY_METHODS)
        async def proxy(path: str, request: Request):
            """Forward any call under /api/proxy/ to the upstream API."""
            try:
                return await self.proxy_gateway.forward(request, path)
            except AccessLayerException:
                raise
            except Exception as e:
                self.logger.error("Proxy handler error", error=str(e), exc_info=True)
                raise UnknownError()

    async def _check_dependencies(self):
        """Report the configured upstream without calling it."""
        return {
            "upstream_environment": self.config.upstream_environment,
            "upstream_base_url": self.upstream.base_url,
        }


def create_app(
    config: Optional[ServiceConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
):
    """Create FastAPI application."""
    service = ConsoleGatewayService(config=config, transport=transport)
    return service.app


if __name__ == "__main__":
    service = ConsoleGatewayService()
    service.run()
