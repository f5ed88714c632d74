import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class Settings(BaseModel):
    # Endpoint credentials
    weather_api_key: str = Field(default="", alias="WEATHER_API_KEY")
    news_api_key: str = Field(default="", alias="NEWS_API_KEY")
    sports_api_key: str = Field(default="", alias="SPORTS_API_KEY")

    # Endpoint query configuration
    weather_city: str = Field(default="Athens", alias="WEATHER_CITY")
    news_country: str = Field(default="us", alias="NEWS_COUNTRY")
    news_category: str = Field(default="business", alias="NEWS_CATEGORY")
    sports_competition: str = Field(default="CL", alias="SPORTS_COMPETITION")
    sports_season: int = Field(default=2025, alias="SPORTS_SEASON")

    # Resilience Configuration
    request_timeout: float = Field(default=10.0, alias="REQUEST_TIMEOUT")
    max_retries: int = Field(default=3, alias="MAX_RETRIES")
    retry_backoff_base: float = Field(default=2.0, alias="RETRY_BACKOFF_BASE")
    fallback_enabled: bool = Field(default=True, alias="FALLBACK_ENABLED")
    http_max_connections: int = Field(default=100, alias="HTTP_MAX_CONNECTIONS")

    # Cache Configuration
    cache_ttl_minutes: float = Field(default=15, alias="CACHE_TTL_MINUTES")
    cache_debug: bool = Field(default=False, alias="CACHE_DEBUG")

    # Server Configuration
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")


def load_settings() -> Settings:
    """Build settings from the process environment (and .env)."""
    fields = {field.alias for field in Settings.model_fields.values()}
    return Settings(**{k: v for k, v in os.environ.items() if k in fields})


global_settings = load_settings()
