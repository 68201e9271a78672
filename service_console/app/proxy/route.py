"""
Proxy route descriptor: ``/api/proxy/<segments...>`` -> ``/<segments...>``.
"""

from dataclasses import dataclass
from typing import Tuple
from urllib.parse import quote

# RFC 3986 pchar minus "/" so each segment stays a single segment.
_SEGMENT_SAFE = "!$&'()*+,;=:@-._~"


@dataclass(frozen=True)
class ProxyRoute:
    segments: Tuple[str, ...]
    query: str = ""

    @classmethod
    def from_path(cls, path: str, query: str = "") -> "ProxyRoute":
        """Build from the catch-all path parameter and the raw query string."""
        segments = tuple(segment for segment in path.split("/") if segment)
        return cls(segments=segments, query=query)

    @property
    def upstream_path(self) -> str:
        return "/" + "/".join(quote(segment, safe=_SEGMENT_SAFE) for segment in self.segments)

    def target_url(self, base_url: str) -> str:
        url = base_url.rstrip("/") + self.upstream_path
        if self.query:
            url = f"{url}?{self.query}"
        return url
