"""
Shared configuration management for the auth service.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env: str = Field(default="local", validation_alias="ACCESS_ENV")
    log_level: str = Field(
        default="info",
        validation_alias=AliasChoices("ACCESS_LOG_LEVEL", "LOG_LEVEL"),
    )

    # Server
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8080, validation_alias="PORT")


class AuthConfig(BaseConfig):
    """Auth service configuration.

    ``jwt_secrets`` holds comma separated ``kid:secret`` pairs and takes
    precedence over the single ``jwt_secret`` when it yields at least one
    pair. ``None`` and ``""`` are different: only an unset value skips the
    multi-secret parsing step entirely.
    """

    service_name: str = "auth"

    # Signing keys
    jwt_secrets: Optional[str] = Field(default=None, validation_alias="JWT_SECRETS")
    jwt_secret: Optional[str] = Field(default=None, validation_alias="JWT_SECRET")
    jwt_active_kid: Optional[str] = Field(default=None, validation_alias="JWT_ACTIVE_KID")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")

    # Password hashing (argon2-cffi RFC 9106 low-memory profile)
    argon2_time_cost: int = Field(default=3, validation_alias="ARGON2_TIME_COST")
    argon2_memory_cost: int = Field(default=65536, validation_alias="ARGON2_MEMORY_COST")
    argon2_parallelism: int = Field(default=4, validation_alias="ARGON2_PARALLELISM")


def get_config(service_name: str = "auth", **overrides) -> AuthConfig:
    """Get configuration for a service."""
    return AuthConfig(service_name=service_name, **overrides)
