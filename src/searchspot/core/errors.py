"""Request-scoped error taxonomy.

Every error here is scoped to a single request; none of them stops the
process. The API layer maps each family onto one HTTP status.
"""

from __future__ import annotations


class SearchspotError(Exception):
    """Base exception for request processing errors."""


# ── Filter validation (client-caused, never retried) ─────────────────────


class InvalidFilterError(SearchspotError):
    """Raised when a raw filter parameter cannot be accepted.

    Attributes:
        field: Name of the offending request parameter.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class UnknownFieldError(InvalidFilterError):
    """The parameter is not declared by the resource schema."""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(field, message or f"Unknown filter field '{field}'")


class TypeMismatchError(InvalidFilterError):
    """The parameter value cannot be coerced to the declared kind."""


class OutOfRangeError(InvalidFilterError):
    """The parameter value is well-typed but describes an impossible range."""


# ── Hit deserialization ──────────────────────────────────────────────────


class DeserializationError(SearchspotError):
    """Raised when a raw hit cannot be turned into a resource record."""


# ── Execution ────────────────────────────────────────────────────────────


class ExecutionError(SearchspotError):
    """Base exception for failures while running a built query."""


class UnavailableError(ExecutionError):
    """The engine could not be reached or timed out. Safe to retry."""


class BadQueryError(ExecutionError):
    """The engine rejected the query. Retrying cannot succeed."""


class CorruptIndexError(ExecutionError):
    """A hit failed to deserialize while strict mode is on."""


class DocumentNotFoundError(ExecutionError):
    """The requested document does not exist in the index."""


# ── Authentication ───────────────────────────────────────────────────────


class AuthError(SearchspotError):
    """Base exception for rejected requests. Rendered as a bare 401."""


class MissingTokenError(AuthError):
    """No token was supplied."""


class InvalidTokenError(AuthError):
    """A token was supplied but did not match any accepted code."""
