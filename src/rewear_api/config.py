"""Configuration management for the ReWear API.

This module provides centralized configuration management using Pydantic settings
with environment variable support, validation, and error handling.
"""

from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IDENTITY_SECRET = "dev-identity-secret-change-me"


class Settings(BaseSettings):
    """Application settings with environment variable support and validation."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    # Database Configuration
    database_url: Annotated[str, Field(description="PostgreSQL or SQLite database connection URL")] = "sqlite:///./rewear.db"
    debug: Annotated[bool, Field(description="Enable debug mode")] = False
    log_level: Annotated[str, Field(description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")] = "INFO"

    # Identity provider configuration
    identity_jwt_secret: Annotated[str, Field(description="Shared secret used to verify identity tokens")] = DEFAULT_IDENTITY_SECRET
    identity_jwt_algorithm: Annotated[str, Field(description="JWT algorithm used by the identity provider")] = "HS256"
    identity_issuer: Annotated[str | None, Field(description="Expected 'iss' claim, verified when set")] = None
    identity_audience: Annotated[str | None, Field(description="Expected 'aud' claim, verified when set")] = None
    identity_token_expire_minutes: Annotated[int, Field(description="Lifetime of locally minted identity tokens")] = 60

    # Points economy
    starting_points: Annotated[int, Field(description="Points balance granted to new users")] = 100
    approval_bonus_points: Annotated[int, Field(description="Points credited when a listing is approved")] = 10
    featured_items_limit: Annotated[int, Field(description="Number of items on the featured shelf")] = 6

    # HTTP configuration
    cors_origins: Annotated[list[str], Field(description="Origins allowed by CORS")] = ["*"]
    allowed_hosts: Annotated[list[str], Field(description="Hosts accepted in production")] = ["*"]

    # Environment Configuration
    environment: Annotated[str, Field(description="Application environment (development, testing, production)")] = "development"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed_levels:
            raise ValueError(f"log_level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("identity_token_expire_minutes", "featured_items_limit")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate counters and lifetimes are positive."""
        if v <= 0:
            raise ValueError("value must be a positive integer")
        return v

    @field_validator("starting_points", "approval_bonus_points")
    @classmethod
    def validate_points(cls, v: int) -> int:
        """Validate point amounts are not negative."""
        if v < 0:
            raise ValueError("point amounts cannot be negative")
        return v

    @field_validator("identity_jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Validate JWT algorithm is supported."""
        allowed_algorithms = {"HS256", "HS384", "HS512"}
        if v not in allowed_algorithms:
            raise ValueError(f"identity_jwt_algorithm must be one of {allowed_algorithms}")
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith(("postgresql://", "postgresql+psycopg2://", "sqlite://")):
            raise ValueError("database_url must be a valid PostgreSQL or SQLite URL")
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment name."""
        allowed = {"development", "testing", "production"}
        if v.lower() not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v.lower()

    @model_validator(mode="after")
    def validate_production_secret(self) -> "Settings":
        """Refuse to run production with the development identity secret."""
        if self.is_production and self.identity_jwt_secret == DEFAULT_IDENTITY_SECRET:
            raise ValueError("identity_jwt_secret must be set in production")
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""
    pass


def get_settings() -> Settings:
    """Get application settings with error handling.

    Returns:
        Settings: Validated application settings

    Raises:
        ConfigurationError: If configuration validation fails
    """
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(f"Configuration validation failed: {str(e)}") from e


# Global settings instance
settings = get_settings()
