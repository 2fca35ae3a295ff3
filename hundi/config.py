"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - default_group_names always contains DEFAULT_GROUP_NAME ("Group A")

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hundi.core.domain_types import DEFAULT_GROUP_NAME


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://hundi:hundi@db:5432/hundi"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10
    database_connect_timeout_seconds: int = 5

    # Runtime: "development" exposes unexpected-error detail in responses
    environment: str = "production"

    # Groups created the first time a donor is added to an empty system
    default_group_names: list[str] = [
        "Group A", "Group B", "Group C", "Group D",
    ]

    @field_validator("default_group_names")
    @classmethod
    def ensure_default_group(cls, v: list[str]) -> list[str]:
        names = [name.strip() for name in v if name and name.strip()]
        if DEFAULT_GROUP_NAME not in names:
            names.insert(0, DEFAULT_GROUP_NAME)
        return names

    # Status rollover
    rollover_batch_size: int = 500

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
