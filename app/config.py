"""Application settings loaded from environment variables."""
from typing import List
from pathlib import Path
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env lives at the project root
ENV_FILE = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Property-Search-API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:8000"]
    # Database
    database_url: str = "sqlite+aiosqlite:///./properties.db"
    auto_create_tables: bool = False

    # Pagination
    default_page_size: int = 12
    max_page_size: int = 100

    # Price ceilings: a max at or above these imposes no constraint
    rent_price_ceiling: float = 100_000
    buy_price_ceiling: float = 50_000_000

    # Query monitoring
    slow_query_threshold_ms: float = 500.0
    enable_query_metrics: bool = True

    related_limit: int = 8

    @field_validator('database_url')
    @classmethod
    def validate_database_url(cls, v):
        if not v.startswith(('postgresql+asyncpg://', 'sqlite+aiosqlite://')):
            raise ValueError('database_url must use async driver')
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            import json
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",")]
        return v


settings = Settings()
