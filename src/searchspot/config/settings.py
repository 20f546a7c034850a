"""Application settings — Pydantic-based configuration with file and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML or TOML config file (if specified)
  2. Environment variables (SEARCHSPOT_ prefix)
  3. Default values

Settings are built once at startup and never mutated afterwards; every
section is frozen, so overrides go through ``model_copy(update=...)``.
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


class ServerSettings(BaseModel):
    """HTTP server configuration."""

    model_config = ConfigDict(frozen=True)

    host: str = Field(default="127.0.0.1", description="Server bind address")
    port: int = Field(default=3000, description="Server port")
    workers: int = Field(default=1, description="Number of worker processes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")


class EngineSettings(BaseModel):
    """Search engine (OpenSearch) connection configuration."""

    model_config = ConfigDict(frozen=True)

    hosts: list[str] = Field(default=["http://localhost:9200"], description="Engine node URLs")
    username: str | None = Field(default=None, description="HTTP basic-auth username")
    password: str | None = Field(default=None, description="HTTP basic-auth password")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates")
    timeout_seconds: float = Field(default=10.0, gt=0, description="Per-request engine timeout")
    indexes: dict[str, str] = Field(
        default_factory=dict,
        description="Resource endpoint name to index name overrides",
    )
    strict: bool = Field(
        default=False,
        description="Abort a search when any hit fails to deserialize instead of dropping it",
    )
    extra: dict[str, Any] = Field(default_factory=dict, description="Extra engine client options")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var) or list."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            # Single host as plain string
            return [v] if v else []
        return list(v)


class SearchSettings(BaseModel):
    """Pagination bounds applied to every filter request."""

    model_config = ConfigDict(frozen=True)

    default_limit: int = Field(default=10, ge=1, description="Page size when no limit is given")
    max_limit: int = Field(default=100, ge=1, description="Upper bound for the page size")
    max_window: int = Field(
        default=10_000,
        ge=1,
        description="Deepest result reachable by offset plus limit (the engine's max_result_window)",
    )


class AuthSettings(BaseModel):
    """Time-based one-time token authentication.

    ``GET`` requests are checked against the ``read`` secret, every other
    method against the ``write`` secret.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=False, description="Require a token on resource routes")
    read: str = Field(default="", description="Shared secret for read requests")
    write: str = Field(default="", description="Shared secret for write requests")
    step_seconds: int = Field(default=30, ge=1, description="Width of one time step")
    digits: int = Field(default=6, ge=6, le=10, description="Number of digits in a code")
    skew_steps: int = Field(default=1, ge=0, description="Accepted clock skew, in steps")


class ObservabilitySettings(BaseModel):
    """Observability configuration."""

    model_config = ConfigDict(frozen=True)

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class Settings(BaseSettings):
    """Root application settings.

    Configuration is loaded from environment variables with the SEARCHSPOT_ prefix.
    Nested settings use double underscores: SEARCHSPOT_SERVER__PORT=9090

    Example:
        SEARCHSPOT_SERVER__PORT=9090
        SEARCHSPOT_ENGINE__HOSTS='["http://es-1:9200", "http://es-2:9200"]'
        SEARCHSPOT_AUTH__ENABLED=true
        SEARCHSPOT_AUTH__READ=...
    """

    model_config = {
        "env_prefix": "SEARCHSPOT_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "frozen": True,
    }

    server: ServerSettings = Field(default_factory=ServerSettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_file(cls, path: str | Path) -> Settings:
        """Load settings from a YAML or TOML configuration file.

        Values from the file win over environment variables; anything the
        file leaves out falls back to the environment, then to defaults.

        Args:
            path: Path to a ``.yaml``/``.yml`` or ``.toml`` file.

        Returns:
            Populated Settings instance.
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        if config_path.suffix == ".toml":
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        else:
            import yaml  # type: ignore[import-untyped]

            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

        return cls(**data)
