"""
Proxy package for the Console Gateway Service.

- route: path/query reconstruction for upstream targets
- relay: typed upstream body variants and the response envelope
- gateway: bearer injection and forwarding
"""

from .gateway import ProxyGateway, PROXY_METHODS
from .relay import JsonBody, TextBody, decode_relay_body, render_relay
from .route import ProxyRoute

__all__ = [
    "JsonBody",
    "PROXY_METHODS",
    "ProxyGateway",
    "ProxyRoute",
    "TextBody",
    "decode_relay_body",
    "render_relay",
]
