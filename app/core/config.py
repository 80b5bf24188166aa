# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string in production)
      - JWT_SECRET (HS256 secret used to verify access tokens)

    Optional:
      - SITE_URL (public storefront origin used in the sitemap)
      - CART_TTL_SECONDS / CART_SESSION_COOKIE
      - LOG_LEVEL
    """

    PROJECT_NAME: str = "Reeown Storefront API"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str

    # JWT verification (backend-side)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    # Public storefront origin, no trailing slash
    SITE_URL: str = "https://reeown.eco-dispose.com"

    # Cart sessions
    CART_TTL_SECONDS: int = 86400  # 24 hours
    CART_SESSION_COOKIE: str = "cart_session"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
