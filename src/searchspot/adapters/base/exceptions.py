"""Adapter-specific exceptions."""


class AdapterError(Exception):
    """Base exception for adapter errors."""


class ConnectionError(AdapterError):
    """Raised when the adapter cannot reach the search backend or it times out."""


class DocumentNotFoundError(AdapterError):
    """Raised when a requested document does not exist."""


class QueryError(AdapterError):
    """Raised when the backend rejects a search request."""


class ConfigurationError(AdapterError):
    """Raised when adapter configuration is invalid."""
