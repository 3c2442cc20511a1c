from functools import lru_cache
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Any, List, Union
import os
import json


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=f"config/{os.getenv('ENV', 'local')}.env",
        case_sensitive=False,
        extra="ignore",
    )

    database_url: str = "sqlite+aiosqlite:///./products.db"
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 30
    log_level: str = "INFO"
    environment: str = "local"
    api_prefix: str = "/api/v1"
    # CORS origins - can be JSON array or comma-separated string
    cors_origins: Union[List[str], str] = ["http://localhost:3000"]
    db_pool_size: int = 10
    db_max_overflow: int = 20

    # Pagination policy for product listings
    default_page_limit: int = 5
    max_page_limit: int = 100

    request_logging: bool = True

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, raw_val: Any) -> Any:
        """Accept a JSON array or a comma-separated string."""
        if not isinstance(raw_val, str):
            return raw_val
        try:
            parsed = json.loads(raw_val)
            return parsed if isinstance(parsed, list) else [parsed]
        except (json.JSONDecodeError, ValueError):
            return [origin.strip() for origin in raw_val.split(",") if origin.strip()]

    @field_validator("max_page_limit", "default_page_limit")
    @classmethod
    def positive_limit(cls, value: int) -> int:
        if value < 1:
            raise ValueError("page limits must be positive")
        return value

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


@lru_cache
def get_settings() -> Settings:
    return Settings()
