"""Configuration settings for the catalog bridge.

Values are read from the environment (or a `.env` file next to the backend).
The Ka-ching import URLs usually carry account and integration query
parameters, so they are configured as complete URLs.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BACKEND_DIR = Path(__file__).parent.parent.parent
ENV_FILE = BACKEND_DIR / ".env"


class Settings(BaseSettings):
    """Catalog bridge settings.

    Attributes:
        KACHING_PRODUCTS_URL: Import endpoint for products
        KACHING_PRODUCT_ASSETS_URL: Import endpoint for product assets
        KACHING_RECOMMENDATIONS_URL: Import endpoint for product recommendations
        KACHING_CATEGORIES_URL: Import endpoint for the category structure
        EXPORT_HTTP_TIMEOUT: Timeout in seconds for a single export request
        ASSOCIATION_CACHE_KEY_PREFIX: Host cache key prefix of association lists
        LOG_LEVEL: Root log level for catalog_bridge loggers
        LOCAL_DEVELOPMENT: Human readable logs instead of JSON lines
        ENVIRONMENT: Deployment environment name, added to every log record
    """

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    KACHING_PRODUCTS_URL: str
    KACHING_PRODUCT_ASSETS_URL: str
    KACHING_RECOMMENDATIONS_URL: str
    KACHING_CATEGORIES_URL: str

    EXPORT_HTTP_TIMEOUT: float = Field(30.0, gt=0)

    # Episerver keeps association lists under "EP:ECF:Ass:<entry id>"
    ASSOCIATION_CACHE_KEY_PREFIX: str = "EP:ECF:Ass:"

    LOG_LEVEL: str = "INFO"
    LOCAL_DEVELOPMENT: bool = False
    ENVIRONMENT: Optional[str] = None

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid LOG_LEVEL: {v}")
        return level


settings = Settings()
