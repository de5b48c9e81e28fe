"""TOTP code engine.

Pure functions over a base32 secret and a unix timestamp. Codes are
HMAC-SHA1, 6 digits, 30 second steps; pyotp does the HOTP arithmetic.
"""

from __future__ import annotations

import base64
import os
import re
from urllib.parse import quote

import pyotp
import pyotp.utils

PERIOD = 30
DIGITS = 6
ALGORITHM = "SHA1"
SECRET_SIZE = 16  # bytes of entropy per secret

# Steps accepted behind the verifier's clock. Codes from the future are never accepted.
SKEW_STEPS = 1

_CODE_RE = re.compile(r"\A[0-9]{%d}\Z" % DIGITS)


class GenerationError(RuntimeError):
    """The entropy source could not produce a secret."""


def generate_secret() -> str:
    """Generate a new secret: 16 random bytes, base32 without padding (26 chars)."""
    try:
        raw = os.urandom(SECRET_SIZE)
    except (OSError, NotImplementedError) as e:
        raise GenerationError(f"entropy source unavailable: {e}") from e
    if len(raw) != SECRET_SIZE:
        raise GenerationError(f"entropy source returned {len(raw)} bytes, expected {SECRET_SIZE}")
    return base64.b32encode(raw).decode("ascii").rstrip("=")


def time_step(timestamp: float) -> int:
    """Index of the 30 second window containing ``timestamp``."""
    return int(timestamp // PERIOD)


def seconds_remaining(timestamp: float) -> int:
    """Seconds until the next window starts (1..30; 30 at a window boundary)."""
    return PERIOD - int(timestamp) % PERIOD


def _code_for_step(secret: str, step: int) -> str:
    return pyotp.TOTP(secret, digits=DIGITS, interval=PERIOD).generate_otp(step)


def derive_code(secret: str, timestamp: float) -> str:
    """Get the 6-digit code for ``secret`` in the window containing ``timestamp``."""
    return _code_for_step(secret, time_step(timestamp))


def validate_code(secret: str, candidate: str, timestamp: float) -> bool:
    """Check ``candidate`` against the current window and the one before it.

    Anything that is not exactly six ASCII digits is rejected outright.
    """
    if not isinstance(candidate, str) or not _CODE_RE.match(candidate):
        return False
    current = time_step(timestamp)
    for step in range(current, current - SKEW_STEPS - 1, -1):
        if step < 0:
            break
        if pyotp.utils.strings_equal(candidate, _code_for_step(secret, step)):
            return True
    return False


def build_provisioning_uri(issuer: str, account_name: str, secret: str) -> str:
    """Build the otpauth:// URI an authenticator app enrolls from."""
    label = f"{quote(issuer, safe='@')}:{quote(account_name, safe='@')}"
    return (
        f"otpauth://totp/{label}"
        f"?secret={secret}"
        f"&issuer={quote(issuer, safe='')}"
        f"&algorithm={ALGORITHM}"
        f"&digits={DIGITS}"
        f"&period={PERIOD}"
    )
