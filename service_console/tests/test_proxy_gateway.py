"""
Tests for the catch-all upstream proxy.
"""

import httpx
import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from shared.config import get_config
from shared.errors import AuthorizationError
from shared.logging import mask_token
from service_console.app.main import ConsoleGatewayService

UPSTREAM_URL = "http://upstream.test/api"


def make_request(method: str, path: str, query: bytes = b"", cookie: str = "") -> Request:
    headers = [(b"cookie", cookie.encode())] if cookie else []
    scope = {
        "type": "http",
        "method": method,
        "scheme": "http",
        "server": ("testserver", 80),
        "path": path,
        "root_path": "",
        "query_string": query,
        "headers": headers,
        "client": ("203.0.113.9", 50000),
    }
    return Request(scope)


@pytest.fixture
def session_client(client):
    client.cookies.set("admin_token", "secret-token-value")
    return client


class TestProxyForwarding:

    def test_path_and_query_reconstructed(self, session_client, upstream):
        upstream.respond_with(200, {"users": []})

        response = session_client.get("/api/proxy/admin/users?active=true")

        assert response.status_code == 200
        assert response.json() == {"users": []}
        assert len(upstream.calls) == 1
        assert upstream.last.method == "GET"
        assert str(upstream.last.url) == f"{UPSTREAM_URL}/admin/users?active=true"
        assert upstream.last.content == b""

    def test_query_string_forwarded_unmodified(self, session_client, upstream):
        session_client.get("/api/proxy/admin/posts?sort=-created_at&tag=a%20b&tag=c")

        assert upstream.last.url.query == b"sort=-created_at&tag=a%20b&tag=c"

    def test_bearer_and_content_type_headers(self, session_client, upstream):
        session_client.get("/api/proxy/admin/stats")

        assert upstream.last.headers["authorization"] == "Bearer secret-token-value"
        assert upstream.last.headers["content-type"] == "application/json"

    def test_forwarded_chain_extended_with_peer(self, session_client, upstream):
        session_client.get("/api/proxy/admin/stats", headers={"X-Forwarded-For": "198.51.100.4, 10.0.0.1"})

        assert upstream.last.headers["x-forwarded-for"] == "198.51.100.4, 10.0.0.1, testclient"

    def test_supplied_forwarded_for_cannot_replace_peer(self, session_client, upstream):
        session_client.get("/api/proxy/admin/stats", headers={"X-Forwarded-For": "1.2.3.4"})

        hops = [hop.strip() for hop in upstream.last.headers["x-forwarded-for"].split(",")]
        assert hops == ["1.2.3.4", "testclient"]

    def test_delete_forwarded_without_body(self, session_client, upstream):
        upstream.respond_with(200, {"success": True})

        response = session_client.delete("/api/proxy/admin/camps/42")

        assert response.status_code == 200
        assert upstream.last.method == "DELETE"
        assert str(upstream.last.url) == f"{UPSTREAM_URL}/admin/camps/42"
        assert upstream.last.content == b""

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH"])
    def test_body_forwarded_byte_for_byte(self, session_client, upstream, method):
        raw = b'{"name":  "Trek", "price": 1200.50, "tags": ["a"]}'

        session_client.request(method, "/api/proxy/admin/packages/9", content=raw)

        assert upstream.last.method == method
        assert upstream.last.content == raw

    def test_non_json_body_forwarded(self, session_client, upstream):
        session_client.post("/api/proxy/admin/import", content=b"plain text payload")

        assert upstream.last.content == b"plain text payload"

    def test_client_cookie_not_used_for_bearer(self, client, upstream):
        client.cookies.set("admin_token", "http-only-copy")
        client.cookies.set("admin_token_client", "readable-copy")

        client.get("/api/proxy/admin/stats")

        assert upstream.last.headers["authorization"] == "Bearer http-only-copy"


class TestProxyRelay:

    @pytest.mark.parametrize("status", [200, 401, 403, 500])
    def test_status_and_json_passthrough(self, session_client, upstream, status):
        payload = {"success": status == 200, "data": {"nested": [1, 2, {"k": None}]}, "message": "m"}
        upstream.respond_with(status, payload)

        response = session_client.get("/api/proxy/admin/users")

        assert response.status_code == status
        assert response.json() == payload

    def test_text_body_wrapped_as_json_string(self, session_client, upstream):
        upstream.respond_with(503, text="Service Unavailable")

        response = session_client.get("/api/proxy/admin/users")

        assert response.status_code == 503
        assert response.headers["content-type"].startswith("application/json")
        assert response.json() == "Service Unavailable"

    def test_json_array_passthrough(self, session_client, upstream):
        upstream.respond_with(200, [{"id": 1}, {"id": 2}])

        response = session_client.get("/api/proxy/admin/camps")

        assert response.json() == [{"id": 1}, {"id": 2}]

    def test_no_content_relayed_without_body(self, session_client, upstream):
        upstream.handler = lambda request: httpx.Response(204)

        response = session_client.delete("/api/proxy/admin/camps/42")

        assert response.status_code == 204
        assert response.content == b""


class TestProxyFailures:

    @pytest.mark.parametrize(
        "exc",
        [
            httpx.ConnectError("Name or service not known"),
            httpx.ReadTimeout("timed out"),
            httpx.RemoteProtocolError("connection reset"),
        ],
    )
    def test_transport_failure_becomes_502(self, session_client, upstream, exc):
        upstream.fail_with(exc)

        response = session_client.get("/api/proxy/admin/users")

        assert response.status_code == 502
        assert response.json() == {"success": False, "message": "Proxy request failed"}

    def test_transport_failure_counted(self, session_client, upstream, service):
        upstream.fail_with(httpx.ConnectError("refused"))

        session_client.get("/api/proxy/admin/users")

        assert service.metrics.registry.get_sample_value(
            "proxy_upstream_failures_total", {"reason": "ConnectError"}
        ) == 1.0

    def test_missing_token_rejected_when_gate_open(self, upstream):
        config = get_config(
            "console",
            3000,
            upstream_base_url=UPSTREAM_URL,
            public_paths=["/login", "/api/auth", "/api/proxy"],
        )
        service = ConsoleGatewayService(config=config, transport=httpx.MockTransport(upstream))
        client = TestClient(service.app)

        response = client.get("/api/proxy/admin/users")

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Authentication required. Please log in."}
        assert len(upstream.calls) == 0


class TestProxyGatewayUnit:

    @pytest.mark.asyncio
    async def test_missing_token_makes_no_upstream_call(self, service, upstream):
        request = make_request("GET", "/api/proxy/admin/users")

        with pytest.raises(AuthorizationError) as exc_info:
            await service.proxy_gateway.forward(request, "admin/users")

        assert exc_info.value.status_code == 401
        assert len(upstream.calls) == 0

    @pytest.mark.asyncio
    async def test_empty_token_treated_as_missing(self, service, upstream):
        request = make_request("GET", "/api/proxy/admin/users", cookie="admin_token=")

        with pytest.raises(AuthorizationError):
            await service.proxy_gateway.forward(request, "admin/users")

        assert upstream.calls == []

    @pytest.mark.asyncio
    async def test_socket_peer_used_when_no_forwarding_headers(self, service, upstream):
        request = make_request("GET", "/api/proxy/admin/stats", cookie="admin_token=abc")

        response = await service.proxy_gateway.forward(request, "admin/stats")

        assert response.status_code == 200
        assert upstream.last.headers["x-forwarded-for"] == "203.0.113.9"

    def test_token_never_logged_in_full(self):
        masked = mask_token("secret-token-value")

        assert masked == "secret-t..."
        assert "secret-token-value" not in masked
        assert mask_token("abcd") == "ab..."
        assert mask_token(None) == "<none>"
