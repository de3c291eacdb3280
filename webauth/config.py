"""
Application configuration using pydantic-settings.
Loads from environment variables with .env file support.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./webauth.db"
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_busy_timeout_ms: int = 5000  # SQLite only

    # Token signing
    jwt_secret_key: str = "change-this-in-production-minimum-32-characters-long"
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "webauth"
    jwt_audience: str = "webauth-clients"
    jwt_expire_minutes: int = 60

    # Password hashing
    bcrypt_rounds: int = 12  # 4..31, each step doubles the cost

    # Account identifiers
    account_id_min: int = 1_000_000
    account_id_max: int = 9_999_999  # exclusive
    account_id_max_attempts: int = 1000

    # "lower": trim + lower-case; "casefold": trim + NFKC + casefold
    key_normalization: Literal["lower", "casefold"] = "lower"

    # Application
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR
    slow_request_ms: int = 2000

    # API Settings
    api_prefix: str = ""
    project_name: str = "WebAuth Credential Service"
    version: str = "1.0.0"
    cors_origins: List[str] = ["http://localhost:5173"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
