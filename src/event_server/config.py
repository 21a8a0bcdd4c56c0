"""Configuration management for the event server.

This module provides centralized configuration management using Pydantic settings
with environment variable support, validation, and error handling. Secrets
(database credentials, JWT key, object storage and SMTP credentials) are only
ever read from the environment or a local ``.env`` file.
"""

from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support and validation."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Database Configuration
    database_url: Annotated[str, Field(description="PostgreSQL or SQLite database connection URL")]
    db_pool_size: Annotated[int, Field(description="Connections kept in the pool (PostgreSQL only)")] = 10
    db_max_overflow: Annotated[int, Field(description="Extra connections created on demand")] = 20
    debug: Annotated[bool, Field(description="Enable debug mode")] = False
    log_level: Annotated[str, Field(description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")] = "INFO"

    # JWT Configuration
    jwt_secret: Annotated[str, Field(description="JWT secret key for token signing")]
    jwt_algorithm: Annotated[str, Field(description="JWT algorithm for token signing")] = "HS256"
    jwt_expire_minutes: Annotated[int, Field(description="JWT token expiration time in minutes")] = 1440

    # Password hashing
    bcrypt_rounds: Annotated[int, Field(description="bcrypt cost factor (4-31)")] = 12

    # HTTP surface
    cors_allowed_origins: Annotated[list[str], Field(description="Origins allowed outside development")] = [
        "http://localhost:3000"
    ]
    allowed_hosts: Annotated[list[str], Field(description="Host headers accepted in production")] = ["*"]

    # Object storage (event posters)
    storage_backend: Annotated[str, Field(description="Poster storage backend (s3, memory)")] = "s3"
    storage_bucket: Annotated[str | None, Field(description="Bucket that receives poster uploads")] = None
    storage_region: Annotated[str | None, Field(description="Bucket region")] = None
    storage_endpoint_url: Annotated[str | None, Field(description="Custom S3-compatible endpoint URL")] = None
    storage_access_key_id: Annotated[str | None, Field(description="Object storage access key id")] = None
    storage_secret_access_key: Annotated[str | None, Field(description="Object storage secret key")] = None
    storage_public_base_url: Annotated[str | None, Field(description="Public URL prefix for stored objects")] = None
    storage_key_prefix: Annotated[str, Field(description="Key prefix for poster objects")] = "posters"
    max_upload_bytes: Annotated[int, Field(description="Maximum poster size in bytes")] = 5 * 1024 * 1024

    # Mail
    mail_backend: Annotated[str, Field(description="Mail backend (smtp, console)")] = "smtp"
    smtp_host: Annotated[str, Field(description="SMTP relay host")] = "localhost"
    smtp_port: Annotated[int, Field(description="SMTP relay port")] = 587
    smtp_username: Annotated[str | None, Field(description="SMTP login user")] = None
    smtp_password: Annotated[str | None, Field(description="SMTP login password")] = None
    smtp_use_tls: Annotated[bool, Field(description="Issue STARTTLS before login")] = True
    smtp_timeout: Annotated[float, Field(description="SMTP socket timeout in seconds")] = 10.0
    mail_from_address: Annotated[str, Field(description="Sender address for outgoing mail")] = "no-reply@example.com"
    mail_from_name: Annotated[str, Field(description="Sender display name")] = "Event Server"

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

    @field_validator("jwt_expire_minutes")
    @classmethod
    def validate_jwt_expire_minutes(cls, v: int) -> int:
        """Validate JWT expiration time is positive."""
        if v <= 0:
            raise ValueError("jwt_expire_minutes must be a positive integer")
        return v

    @field_validator("jwt_algorithm")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Validate JWT algorithm is supported."""
        allowed_algorithms = {"HS256", "HS384", "HS512"}
        if v not in allowed_algorithms:
            raise ValueError(f"jwt_algorithm must be one of {allowed_algorithms}")
        return v

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """bcrypt only accepts cost factors between 4 and 31."""
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL format."""
        if not v.startswith(("postgresql://", "postgresql+psycopg2://", "sqlite:///")):
            raise ValueError("database_url must be a valid PostgreSQL or SQLite URL")
        return v

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        if v.lower() not in {"s3", "memory"}:
            raise ValueError("storage_backend must be one of {'s3', 'memory'}")
        return v.lower()

    @field_validator("mail_backend")
    @classmethod
    def validate_mail_backend(cls, v: str) -> str:
        if v.lower() not in {"smtp", "console"}:
            raise ValueError("mail_backend must be one of {'smtp', 'console'}")
        return v.lower()

    @field_validator("max_upload_bytes")
    @classmethod
    def validate_max_upload_bytes(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_upload_bytes must be a positive integer")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment.lower() == "testing"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def safe_database_url(self) -> str:
        """Database URL with credentials stripped, for logs and health output."""
        if "@" in self.database_url:
            return self.database_url.split("@")[-1]
        return self.database_url


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""
    pass


@lru_cache
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
