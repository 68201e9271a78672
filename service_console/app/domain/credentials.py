"""
Credential cookie handling.

The upstream bearer token is stored twice: an httpOnly copy read by the
session gate and the proxy, and a script-readable copy for API clients that
attach the Authorization header themselves. Both copies are always written
and cleared together with the same attributes.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request, Response

from shared.config import BaseConfig

ACCESS_COOKIE_NAME = "admin_token"
CLIENT_COOKIE_NAME = "admin_token_client"


@dataclass(frozen=True)
class CookiePolicy:
    """Attributes shared by both credential cookies."""

    max_age: int
    secure: bool
    samesite: str = "lax"
    path: str = "/"

    @classmethod
    def from_config(cls, config: BaseConfig) -> "CookiePolicy":
        return cls(max_age=config.session_max_age_seconds, secure=bool(config.cookie_secure))


def _write_pair(response: Response, value: str, max_age: int, policy: CookiePolicy) -> None:
    for name, httponly in ((ACCESS_COOKIE_NAME, True), (CLIENT_COOKIE_NAME, False)):
        response.set_cookie(
            key=name,
            value=value,
            max_age=max_age,
            path=policy.path,
            secure=policy.secure,
            httponly=httponly,
            samesite=policy.samesite,
        )


def issue_credential_cookies(response: Response, token: str, policy: CookiePolicy) -> None:
    """Store the bearer token in both credential cookies."""
    _write_pair(response, token, policy.max_age, policy)


def clear_credential_cookies(response: Response, policy: CookiePolicy) -> None:
    """Overwrite both credential cookies with an empty, expired value."""
    _write_pair(response, "", 0, policy)


def read_credential(request: Request) -> Optional[str]:
    """Return the httpOnly credential, or None when absent or empty."""
    return request.cookies.get(ACCESS_COOKIE_NAME) or None
