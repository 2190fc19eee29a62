from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


DEFAULT_JWT_SECRET = "your-secret-key-here-change-in-production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True

    # Application
    app_name: str = "Fupisha"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Store
    store_backend: str = "postgres"  # Options: "postgres", "memory"
    database_address: str = "localhost:5432"
    database_user: str = "fupisha"
    database_password: str = "fupisha"
    database_name: str = "fupisha"

    # URL shortener specific
    base_url: str = "http://127.0.0.1:8000"
    alias_length: int = 6
    max_retries: int = 5

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    jwt_expiration_minutes: int = 10080  # 7 days

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Refuse to run production with the default token secret."""
        if self.environment == "production" and self.jwt_secret == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET must be changed in production")
        return self


# Create settings instance
settings = Settings()
