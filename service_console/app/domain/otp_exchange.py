"""
Phone + OTP login exchange.

Both operations are thin normalizing wrappers over one upstream call each.
Input validation happens before any network traffic; every other failure is
turned into a generic 500 so raw exception detail never reaches the caller.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from shared.errors import AuthenticationError, UnknownError, ValidationError
from shared.logging import get_logger
from shared.metrics import MetricsCollector

from ..adapters.identity_client import IdentityClient

PHONE_NUMBER_PATTERN = re.compile(r"[0-9]{10}")

INVALID_PHONE_MESSAGE = "A valid 10-digit phone number is required."
MISSING_FIELDS_MESSAGE = "Phone number and OTP are required."
INVALID_OTP_MESSAGE = "Invalid OTP."
SEND_FAILED_MESSAGE = "Failed to send OTP. Please try again."
VERIFY_FAILED_MESSAGE = "Verification failed. Please try again."


@dataclass
class OtpRequestResult:
    """Upstream send-otp outcome, relayed verbatim."""

    status_code: int
    body: Any


@dataclass
class OtpVerification:
    """A successful verification: the token goes to cookies, the user to the body."""

    token: str
    user: Any = None


def validate_phone_number(phone_number: Any) -> str:
    if not isinstance(phone_number, str) or not PHONE_NUMBER_PATTERN.fullmatch(phone_number):
        raise ValidationError(INVALID_PHONE_MESSAGE)
    return phone_number


class OtpExchangeService:
    """Relays OTP request and verification to the upstream identity API."""

    def __init__(self, identity_client: IdentityClient, metrics: Optional[MetricsCollector] = None):
        self.identity_client = identity_client
        self.metrics = metrics
        self.logger = get_logger("console.otp_exchange")

    def _record(self, operation: str, outcome: str):
        if self.metrics:
            self.metrics.increment_counter("otp_requests_total", operation=operation, outcome=outcome)

    async def request_otp(self, phone_number: Any) -> OtpRequestResult:
        try:
            phone_number = validate_phone_number(phone_number)
        except ValidationError:
            self._record("request", "invalid")
            raise

        try:
            status_code, body = await self.identity_client.send_otp(phone_number)
        except Exception as e:
            self.logger.error("OTP request failed", error_type=type(e).__name__, error=str(e))
            self._record("request", "error")
            raise UnknownError(SEND_FAILED_MESSAGE)

        self._record("request", "relayed")
        return OtpRequestResult(status_code=status_code, body=body)

    async def verify_otp(self, phone_number: Any, otp: Any) -> OtpVerification:
        if not phone_number or not otp:
            self._record("verify", "invalid")
            raise ValidationError(MISSING_FIELDS_MESSAGE)

        try:
            status_code, body = await self.identity_client.verify_otp(phone_number, otp)
        except Exception as e:
            self.logger.error("OTP verification failed", error_type=type(e).__name__, error=str(e))
            self._record("verify", "error")
            raise UnknownError(VERIFY_FAILED_MESSAGE)

        if not isinstance(body, dict):
            body = {}

        token = body.get("token")
        if not body.get("success") or not token:
            self._record("verify", "rejected")
            self.logger.info("Upstream rejected OTP", status_code=status_code)
            raise AuthenticationError(
                body.get("message") or INVALID_OTP_MESSAGE,
                status_code=status_code,
            )

        self._record("verify", "verified")
        return OtpVerification(token=str(token), user=body.get("user"))


async def read_json_object(request) -> Dict[str, Any]:
    """Decode an inbound JSON body; non-object documents read as empty."""
    payload = await request.json()
    return payload if isinstance(payload, dict) else {}


__all__ = [
    "OtpExchangeService",
    "OtpRequestResult",
    "OtpVerification",
    "read_json_object",
    "validate_phone_number",
]
