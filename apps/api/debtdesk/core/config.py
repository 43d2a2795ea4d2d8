"""Application configuration with environment variables."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.03.00"

    # Database
    DATABASE_URL: str

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Field-level PII encryption (SSN, date of birth)
    DATA_ENCRYPTION_KEY: str = ""  # Fernet key

    # Rate Limiting (requests per minute)
    RATE_LIMIT_API: int = 60  # General API
    RATE_LIMIT_IMPORT: int = 10  # Bulk import endpoints
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    # Bulk import
    IMPORT_MAX_ROWS: int = 50000
    FILE_NUMBER_PREFIX: str = "FN"
    FILE_NUMBER_WIDTH: int = 6
    DEFAULT_FILE_NUMBER_START: int = 1
    # "zero": unparseable currency silently becomes 0
    # "warn": still 0, but the row gets a warning in the import result
    CURRENCY_PARSE_FAILURE: Literal["zero", "warn"] = "zero"
    # When enabled, accounts created earlier in a batch are matchable by later rows
    IMPORT_DEDUPE_WITHIN_BATCH: bool = False

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
