# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string, or sqlite:// for local runs)
      - SECRET_KEY (JWT signing secret)

    Optional:
      - SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY
        (only used for product image uploads to Supabase Storage)
      - SMTP_* (read by storefront/core/email_client.py)
    """

    PROJECT_NAME: str = "Storefront API"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str

    # JWT issuing / verification
    SECRET_KEY: str
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Password reset
    RESET_TOKEN_EXPIRE_MINUTES: int = 60
    PASSWORD_RESET_URL: str = "http://localhost:3000/reset"

    # Catalog paging
    PRODUCTS_PER_PAGE: int = 2

    # Upper bound for a single database call made by a service
    STORE_TIMEOUT_SECONDS: float = 5.0

    # Where rendered invoices are persisted
    INVOICE_DIR: str = "data/invoices"

    # Supabase Storage (product images)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
