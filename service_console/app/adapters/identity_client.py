"""
Identity API client for the console gateway.

Wraps the two upstream OTP endpoints. The upstream owns all OTP state and
enforces that the verified phone number belongs to an administrator.
"""

from typing import Any, Tuple

from shared.logging import get_logger

from .upstream_client import UpstreamClient

SEND_OTP_PATH = "/admin/auth/send-otp"
VERIFY_OTP_PATH = "/admin/auth/verify-otp"


class IdentityClient:
    """Client for the upstream admin identity endpoints."""

    def __init__(self, upstream: UpstreamClient):
        self.upstream = upstream
        self.logger = get_logger("console.identity_client")

    async def send_otp(self, phone_number: str) -> Tuple[int, Any]:
        """Ask upstream to send an OTP. Returns (status_code, decoded JSON body)."""
        response = await self.upstream.post_json(SEND_OTP_PATH, {"phone_number": phone_number})
        self.logger.info("OTP send relayed", status_code=response.status_code)
        return response.status_code, response.json()

    async def verify_otp(self, phone_number: str, otp: Any) -> Tuple[int, Any]:
        """Ask upstream to verify an OTP. Returns (status_code, decoded JSON body)."""
        response = await self.upstream.post_json(
            VERIFY_OTP_PATH,
            {"phone_number": phone_number, "otp": otp},
        )
        self.logger.info("OTP verify relayed", status_code=response.status_code)
        return response.status_code, response.json()
