"""CleanAds Proxy — Central Configuration via Pydantic Settings."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── CleanAds API ──
    cleanads_base_url: str = "https://cleanads.net"
    request_timeout: float = 30.0

    # ── Proxy ──
    proxy_api_key: Optional[str] = None  # Shared secret expected in X-API-Key
    default_range_days: int = 7

    # ── App ──
    environment: str = "production"  # production | development
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()


def get_settings() -> Settings:
    """Dependency — returns the active settings."""
    return settings
