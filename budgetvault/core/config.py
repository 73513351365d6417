"""
Application configuration module.
Loads configuration from environment variables and provides validation.
"""

import json
from functools import lru_cache
from typing import List, Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application Settings
    app_name: str = Field(default="BudgetVault API")
    app_version: str = Field(default="0.1.0")
    debug: bool = Field(default=False)
    environment: str = Field(default="development")

    # Server Configuration
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database Configuration
    database_url: str = Field(default="sqlite+aiosqlite:///./budgetvault.db")
    database_pool_size: int = Field(default=10)
    database_max_overflow: int = Field(default=20)

    # Security Settings
    jwt_secret_key: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=30)

    # CORS Settings
    cors_origins: List[str] = Field(default_factory=list)
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    # Snapshot import limits
    import_max_bytes: int = Field(
        default=3 * 1024 * 1024,
        description="Largest snapshot document accepted by the import endpoints",
    )

    @field_validator("cors_origins", "cors_allow_methods", "cors_allow_headers", mode="before")
    def parse_list_fields(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse list fields from a JSON string, a plain string or a list."""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [v]
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()


# Create a global settings instance
settings = get_settings()
