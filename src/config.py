"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "User Auth API"
    app_version: str = "0.1.0"
    debug: bool = False
    api_prefix: str = "/api"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000

    # CORS (single-page frontend origin)
    cors_origins: list[str] = ["http://localhost:3000"]

    # Database
    database_path: str = "./data/users.db"

    # Authentication
    jwt_secret_key: SecretStr | None = None  # Required; startup fails without it
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24  # Token expiration in hours
    bcrypt_rounds: int = 12  # Work factor for password hashing

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # Render logs as JSON lines instead of console output

    # Tracing
    tracing_enabled: bool = False
    tracing_console_export: bool = False
    otlp_endpoint: str | None = None  # e.g. "http://localhost:4318"
    tracing_sample_rate: float = 1.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
