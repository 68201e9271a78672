"""
Shared fixtures for console gateway tests.
"""

import json
from typing import Callable, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from shared.config import get_config
from service_console.app.main import ConsoleGatewayService

UPSTREAM_URL = "http://upstream.test/api"


class UpstreamRecorder:
    """httpx mock transport that records every outbound request."""

    def __init__(self):
        self.calls: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = self.default_handler

    @staticmethod
    def default_handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": True})

    def respond_with(self, status_code: int = 200, json_body=None, text: Optional[str] = None, headers=None):
        def _handler(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status_code, text=text, headers=headers)
            return httpx.Response(status_code, json=json_body, headers=headers)

        self.handler = _handler

    def fail_with(self, exc: Exception):
        def _handler(request: httpx.Request) -> httpx.Response:
            raise exc

        self.handler = _handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        return self.handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.calls[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def upstream():
    return UpstreamRecorder()


@pytest.fixture
def config():
    return get_config("console", 3000, upstream_base_url=UPSTREAM_URL, env="test")


@pytest.fixture
def service(config, upstream):
    return ConsoleGatewayService(config=config, transport=httpx.MockTransport(upstream))


@pytest.fixture
def client(service):
    return TestClient(service.app, follow_redirects=False)
