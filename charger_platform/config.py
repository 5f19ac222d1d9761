from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    app_name: str = "ChargerSync"
    app_env: str = "development"
    app_version: str = "0.1.0"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # Station table
    database_url: str = "sqlite:///chargers.db"
    batch_size: int = 25
    scan_page_size: int = 1000

    # Upstream Open Charge Map
    ocm_url: str = "https://api.openchargemap.io/v3/poi/"
    ocm_api_key: Optional[str] = None
    country_code: str = "RS"
    max_results: int = 1000
    http_timeout_connect: float = 5.0
    http_timeout_read: float = 30.0
    http_max_retries: int = 0
    skip_delete_when_truncated: bool = False

    # Frontend site allowed by CORS
    allowed_origin: str = "http://localhost:3000"

    # .env support and prefix for clarity
    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
