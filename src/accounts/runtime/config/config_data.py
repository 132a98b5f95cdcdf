"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field

# Placeholder shipped in config.yaml; refused at startup in production.
DEV_SIGNING_SECRET = "dev-only-signing-secret-change-me"


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(default=["GET", "POST", "PUT", "OPTIONS"])
    allow_headers: list[str] = Field(default=["*"])


class JWTConfig(BaseModel):
    """JWT issuing and validation configuration."""

    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="JWT algorithms allowed for token validation",
    )
    algorithm: str = Field(default="HS256", description="Algorithm used to sign tokens")
    gen_issuer: str = Field(
        default="accounts-api", description="Issuer name to use when generating tokens"
    )
    access_token_ttl_seconds: int = Field(
        default=3600, description="Lifetime of tokens issued by login"
    )
    clock_skew: int = Field(default=0, description="Clock skew tolerance in seconds")


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="plain", description="Log format")
    file: str | None = Field(default=None, description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite://",
        description="Database connection URL (defaults to an in-memory database)",
    )
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")

    @computed_field
    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @computed_field
    @property
    def is_memory(self) -> bool:
        """True when the database lives only as long as the process."""
        if not self.is_sqlite:
            return False
        path = self.url.split("://", 1)[-1]
        return path in ("", "/", "/:memory:") or ":memory:" in path

    @computed_field
    @property
    def connection_string(self) -> str:
        """Connection string handed to SQLAlchemy."""
        return self.url


class AppConfig(BaseModel):
    """Application configuration model."""

    name: str = Field(default="accounts-api", description="Application name")
    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int = Field(default=5000, description="Application port")
    session_signing_secret: str | None = Field(
        default=None, description="Secret for signing session JWTs"
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
