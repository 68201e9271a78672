"""
Adapters package for the Console Gateway Service.

Contains HTTP client wrappers for the upstream API. These adapters
encapsulate:

- Base URLs and request shapes
- Translation of transport failures into shared errors

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .upstream_client import UpstreamClient, create_http_client
from .identity_client import IdentityClient

__all__ = [
    "UpstreamClient",
    "IdentityClient",
    "create_http_client",
]
