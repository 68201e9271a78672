"""
Session gate for the console.

Runs before every route. Requests outside the public prefixes must carry
the httpOnly credential cookie or they are redirected to the login page
with the original path in ``from``. The token itself is not validated
here; the upstream API rejects stale tokens on the next proxied call.
"""

import re
from enum import Enum
from typing import Iterable, Optional
from urllib.parse import urlencode

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse

from shared.logging import get_logger
from shared.metrics import MetricsCollector

from .credentials import read_credential

LOGIN_PATH = "/login"
GATE_REDIRECT_ENDPOINT = "gate_redirect"


class AccessDecision(str, Enum):
    ALLOW = "allow"
    REDIRECT_TO_LOGIN = "redirect_to_login"


class SessionGate:
    """Path + cookie access decision."""

    def __init__(self, public_paths: Iterable[str], excluded_pattern: str, login_path: str = LOGIN_PATH):
        self.public_paths = tuple(public_paths)
        self.excluded = re.compile(excluded_pattern)
        self.login_path = login_path

    def is_excluded(self, path: str) -> bool:
        return self.excluded.search(path) is not None

    def is_public(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.public_paths)

    def decide(self, path: str, token: Optional[str]) -> AccessDecision:
        if self.is_excluded(path) or self.is_public(path):
            return AccessDecision.ALLOW
        if not token:
            return AccessDecision.REDIRECT_TO_LOGIN
        return AccessDecision.ALLOW

    def login_redirect_url(self, path: str) -> str:
        return f"{self.login_path}?{urlencode({'from': path})}"


class SessionGateMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, gate: SessionGate, metrics: Optional[MetricsCollector] = None):
        super().__init__(app)
        self.gate = gate
        self.metrics = metrics
        self.logger = get_logger("console.session_gate")

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        decision = self.gate.decide(path, read_credential(request))

        if decision is AccessDecision.REDIRECT_TO_LOGIN:
            self.logger.info("Redirecting unauthenticated request to login", path=path)
            request.state.metrics_endpoint = GATE_REDIRECT_ENDPOINT
            if self.metrics:
                self.metrics.increment_counter("gate_redirects_total")
            return RedirectResponse(url=self.gate.login_redirect_url(path), status_code=307)

        return await call_next(request)
