"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Daybook")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/daybook",
        description="PostgreSQL connection URL with asyncpg driver",
    )

    # Civil calendar
    civil_timezone: str = Field(
        default="America/Los_Angeles",
        description="IANA zone that defines which calendar day a task belongs to",
    )

    # Ordering
    order_gap: int = Field(
        default=10,
        gt=1,
        description="Spacing between display orders appended to a day",
    )

    # Rollover
    rollover_enabled: bool = Field(
        default=True,
        description="Run the nightly rollover loop in the worker",
    )
    rollover_run_offset_minutes: int = Field(
        default=5,
        ge=0,
        lt=24 * 60,
        description="Minutes after civil midnight at which the nightly rollover runs",
    )
    rollover_require_adjacent: bool = Field(
        default=False,
        description="Reject rollovers whose destination is not the next civil day",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Render and other providers supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
