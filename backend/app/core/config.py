from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    seobeast_webhook_secret: str | None = None
    seobeast_api_url: str = "http://localhost:8080"
    seobeast_website_slug: str = ""
    cache_ttl_seconds: float = 60
    cache_max_entries: int = 1024
    posts_page_size: int = 20
    http_timeout_seconds: float = 10
    max_body_size: int = 1_048_576  # 1 MiB
    allowed_origins: str = (
        "http://localhost:3000,https://app.example.com"  # Default allowed origins
    )
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def webhook_configured(self) -> bool:
        return bool(self.seobeast_webhook_secret)


@lru_cache
def get_settings() -> Settings:
    return Settings()
