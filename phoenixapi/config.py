from functools import lru_cache
from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="phoenixapi/.env",
        env_file_encoding="utf-8",
        extra="allow",
    )
    # Application
    APP_NAME: str = "Liquid Phoenix API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    # Database
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USERNAME: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DATABASE: str = "postgres"
    POSTGRES_SCHEMA: str = "public"

    # Takes precedence over the POSTGRES_* components when set
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    @property
    def database_url(self) -> str:
        """Construct database URL from individual components"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        # URL encode the password to handle special characters
        encoded_password = quote_plus(self.POSTGRES_PASSWORD)
        return f"postgresql+psycopg2://{self.POSTGRES_USERNAME}:{encoded_password}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DATABASE}"

    # Security
    SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    SESSION_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    PASSWORD_MIN_LENGTH: int = 6
    BCRYPT_ROUNDS: int = 12

    # Plaid
    PLAID_CLIENT_ID: str = ""
    PLAID_SECRET: str = ""
    PLAID_ENV: str = "sandbox"
    PLAID_CLIENT_NAME: str = "Liquid Phoenix"
    PLAID_TIMEOUT_SECONDS: float = 30.0

    # News feed
    NEWS_GENERAL_RSS_URL: str = (
        "https://news.google.com/rss/search?q=stock+market+news+when:7d&hl=en-US&gl=US&ceid=US:en"
    )
    NEWS_SYMBOL_RSS_URL: str = (
        "https://news.google.com/rss/search?q={query}+when:7d&hl=en-US&gl=US&ceid=US:en"
    )
    NEWS_GENERAL_LIMIT: int = 15
    NEWS_SYMBOL_LIMIT: int = 3
    NEWS_MAX_SYMBOLS: int = 10
    NEWS_MAX_ARTICLES: int = 50
    NEWS_TIMEOUT_SECONDS: float = 15.0

    # Price feed
    PRICE_FETCH_DELAY_SECONDS: float = 0.5

    # Portfolio goal defaults
    DEFAULT_GOAL_STARTING_AMOUNT: float = 15000
    DEFAULT_GOAL_TARGET_AMOUNT: float = 100000
    DEFAULT_GOAL_TARGET_DATE: str = "2026-12-31"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
