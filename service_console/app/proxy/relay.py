"""
Relay of upstream responses back to the browser.

The upstream body is decoded into one of two variants by content-type and
always re-emitted as JSON with the upstream status code untouched.
"""

import json
from dataclasses import dataclass
from typing import Any, Union

from fastapi import Response
from fastapi.responses import JSONResponse

JSON_CONTENT_TYPE = "application/json"

# Statuses that must not carry a body.
_BODYLESS_STATUSES = frozenset({204, 304})


@dataclass(frozen=True)
class JsonBody:
    value: Any


@dataclass(frozen=True)
class TextBody:
    text: str


RelayBody = Union[JsonBody, TextBody]


def decode_relay_body(content_type: str, text: str) -> RelayBody:
    """Choose the relay variant for an upstream response."""
    if JSON_CONTENT_TYPE in (content_type or "").lower():
        try:
            return JsonBody(json.loads(text))
        except ValueError:
            return TextBody(text)
    return TextBody(text)


def render_relay(body: RelayBody, status_code: int) -> Response:
    """Wrap a relay body in the local JSON envelope."""
    if status_code in _BODYLESS_STATUSES:
        return Response(status_code=status_code)
    if isinstance(body, JsonBody):
        return JSONResponse(content=body.value, status_code=status_code)
    if isinstance(body, TextBody):
        return JSONResponse(content=body.text, status_code=status_code)
    raise TypeError(f"Unsupported relay body: {type(body).__name__}")
