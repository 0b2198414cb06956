"""Application settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings."""

    debug_mode: bool = False
    catalog_api_base_url: str = "http://localhost:8080"
    http_timeout_seconds: float = 10.0
    cache_backend: str = "in_memory"  # in_memory or redis
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl_default_seconds: int = 300  # search result pages
    cache_ttl_short_seconds: int = 60  # popular and similar cars
    cache_ttl_long_seconds: int = 1800  # car detail and price analysis
    default_page_size: int = 20
    recent_query_limit: int = 20
    recent_query_store: str = "in_memory"  # in_memory, file or postgres
    recent_query_file_path: str = ".autofinder/search_history.json"
    database_url: str = ""  # Required when recent_query_store=postgres
    event_sink: str = "logging"  # noop, logging or http
    discard_stale_responses: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
    )


settings = Settings()
