"""
Domain utilities for the Console Gateway Service.

Includes the session gate, the credential cookie helpers, and the OTP
login exchange. None of these hold state between requests.
"""

from .credentials import CookiePolicy, issue_credential_cookies, clear_credential_cookies, read_credential
from .otp_exchange import OtpExchangeService
from .session_gate import AccessDecision, SessionGate, SessionGateMiddleware

__all__ = [
    "AccessDecision",
    "CookiePolicy",
    "OtpExchangeService",
    "SessionGate",
    "SessionGateMiddleware",
    "clear_credential_cookies",
    "issue_credential_cookies",
    "read_credential",
]
