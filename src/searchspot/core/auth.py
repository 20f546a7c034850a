"""Auth gate — time-based one-time tokens checked per HTTP method class.

Requests carry ``Authorization: token <code>``. ``GET`` requests are checked
against the read secret and every other method against the write secret. A
code is the truncated HMAC-SHA1 of the secret over the current time step; the
steps right before and after the current one are accepted as well, up to
``skew_steps``.

Verification keeps no state between requests: it is a pure function of the
token, the secret and the current time.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import struct
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Protocol

from searchspot.config.settings import AuthSettings
from searchspot.core.errors import InvalidTokenError, MissingTokenError

logger = logging.getLogger(__name__)

TOKEN_SCHEME = "token"


class MethodClass(str, Enum):
    """Which secret a request is checked against."""

    READ = "read"
    WRITE = "write"


def method_class(http_method: str) -> MethodClass:
    """``GET`` reads; everything else writes."""
    return MethodClass.READ if http_method.upper() == "GET" else MethodClass.WRITE


# ── Clocks ───────────────────────────────────────────────────────────────


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FrozenClock:
    """Clock pinned to a fixed instant, for tests."""

    def __init__(self, fixed: datetime) -> None:
        self._fixed = fixed

    def now(self) -> datetime:
        return self._fixed

    def advance(self, **kwargs: float) -> None:
        self._fixed += timedelta(**kwargs)


# ── Codes ────────────────────────────────────────────────────────────────


def generate_token(secret: str, for_time: datetime | float, *, digits: int = 6, step: int = 30) -> str:
    """Compute the one-time code of ``secret`` for the step holding ``for_time``.

    Args:
        secret: Shared secret; its UTF-8 bytes are the HMAC key.
        for_time: Instant as a datetime or a Unix timestamp.
        digits: Code length.
        step: Step width in seconds.

    Returns:
        The zero-padded decimal code.
    """
    timestamp = for_time.timestamp() if isinstance(for_time, datetime) else for_time
    return _code(secret, int(timestamp) // step, digits)


def verify_token(
    token: str,
    secret: str,
    for_time: datetime | float,
    *,
    digits: int = 6,
    step: int = 30,
    skew_steps: int = 1,
) -> bool:
    """Whether ``token`` matches the code of any step within the skew window."""
    if not secret or len(token) != digits or not token.isdigit():
        return False
    timestamp = for_time.timestamp() if isinstance(for_time, datetime) else for_time
    counter = int(timestamp) // step
    matched = False
    for offset in range(-skew_steps, skew_steps + 1):
        if counter + offset < 0:
            continue
        matched |= hmac.compare_digest(_code(secret, counter + offset, digits), token)
    return matched


def parse_authorization(header: str | None) -> str | None:
    """Extract the code from an ``Authorization`` header value.

    Returns None when the header is absent, empty, or uses another scheme.
    """
    if not header:
        return None
    scheme, _, code = header.strip().partition(" ")
    if scheme.lower() != TOKEN_SCHEME:
        return None
    return code.strip() or None


def _code(secret: str, counter: int, digits: int) -> str:
    digest = hmac.new(secret.encode(), struct.pack(">Q", counter), hashlib.sha1).digest()
    offset = digest[-1] & 0x0F
    binary = struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF
    return str(binary % 10**digits).zfill(digits)


# ── Gate ─────────────────────────────────────────────────────────────────


class AuthGate:
    """Accepts or rejects a request token.

    Disabled gates accept everything, missing tokens included.

    Args:
        settings: Secrets and code parameters.
        clock: Time source. Defaults to the system clock.
    """

    def __init__(self, settings: AuthSettings, clock: Clock | None = None) -> None:
        self.settings = settings
        self.clock = clock or SystemClock()

    @property
    def enabled(self) -> bool:
        return self.settings.enabled

    def secret_for(self, method: MethodClass) -> str:
        return self.settings.read if method is MethodClass.READ else self.settings.write

    def authorize(self, token: str | None, method: MethodClass) -> None:
        """Check ``token`` for a request of class ``method``.

        Raises:
            MissingTokenError: Auth is enabled and no token was supplied.
            InvalidTokenError: The token does not match the selected secret.
        """
        if not self.settings.enabled:
            return
        if not token:
            logger.info("Rejected %s request: missing token", method.value)
            raise MissingTokenError("missing token")

        valid = verify_token(
            token,
            self.secret_for(method),
            self.clock.now(),
            digits=self.settings.digits,
            step=self.settings.step_seconds,
            skew_steps=self.settings.skew_steps,
        )
        if not valid:
            logger.info("Rejected %s request: invalid token", method.value)
            raise InvalidTokenError("invalid token")
