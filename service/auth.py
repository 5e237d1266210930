"""
Stateless submission tokens for the feedback endpoint.

A token is "<timestamp>.<signature>": the issue time in epoch milliseconds and
a base64 HMAC-SHA256 of that timestamp string under the server secret. Nothing
is stored; verification recomputes the signature. A token stays reusable until
it expires, there is no replay tracking inside the window.
"""

import base64
import hashlib
import hmac
import logging
import time
from enum import Enum

from .logging_utils import log_function

logger = logging.getLogger(__name__)

TOKEN_SEPARATOR = "."
TOKEN_EXPIRY_MS = 5 * 60 * 1000

# Epoch milliseconds stay well under this many digits for millennia
MAX_TIMESTAMP_DIGITS = 16


class TokenStatus(str, Enum):
    """Outcome of verifying a submission token."""
    VALID = "valid"
    MISSING = "missing"
    MALFORMED = "malformed"
    EXPIRED = "expired"
    BAD_SIGNATURE = "bad_signature"

    @property
    def ok(self) -> bool:
        return self is TokenStatus.VALID

    @property
    def message(self) -> str:
        return _STATUS_MESSAGES[self]


_STATUS_MESSAGES = {
    TokenStatus.VALID: "Token is valid",
    TokenStatus.MISSING: "Token is required",
    TokenStatus.MALFORMED: "Invalid token format",
    TokenStatus.EXPIRED: "Token expired",
    TokenStatus.BAD_SIGNATURE: "Invalid token signature",
}


def _now_ms() -> int:
    return int(time.time() * 1000)


def sign(secret: str, timestamp: str) -> str:
    """Base64 HMAC-SHA256 of the timestamp string."""
    digest = hmac.new(
        secret.encode("utf-8"), timestamp.encode("utf-8"), hashlib.sha256
    ).digest()
    return base64.b64encode(digest).decode("ascii")


@log_function(redact_result=True)
def issue_token(secret: str, now_ms: int | None = None) -> str:
    """Issue a token stamped with the current time (or ``now_ms``)."""
    timestamp = str(_now_ms() if now_ms is None else now_ms)
    return f"{timestamp}{TOKEN_SEPARATOR}{sign(secret, timestamp)}"


@log_function
def verify_token(
    token: str | None,
    secret: str,
    now_ms: int | None = None,
    expiry_ms: int = TOKEN_EXPIRY_MS,
) -> TokenStatus:
    """Check a presented token, returning the first failed check or VALID."""
    if not token:
        return TokenStatus.MISSING

    parts = token.split(TOKEN_SEPARATOR)
    if len(parts) != 2 or not all(parts):
        return TokenStatus.MALFORMED

    timestamp, signature = parts

    # Unparseable timestamps are reported as expired
    if not (timestamp.isascii() and timestamp.isdigit()) or len(timestamp) > MAX_TIMESTAMP_DIGITS:
        logger.debug("Token timestamp is not a plausible epoch-ms value")
        return TokenStatus.EXPIRED

    now = _now_ms() if now_ms is None else now_ms
    age = now - int(timestamp)
    if age < 0 or age > expiry_ms:
        logger.info(f"Token rejected: age={age}ms outside [0, {expiry_ms}]")
        return TokenStatus.EXPIRED

    expected = sign(secret, timestamp)
    if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("ascii")):
        return TokenStatus.BAD_SIGNATURE

    return TokenStatus.VALID
