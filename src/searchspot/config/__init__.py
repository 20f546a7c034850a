"""Process-wide configuration."""

from searchspot.config.settings import Settings

__all__ = ["Settings"]
