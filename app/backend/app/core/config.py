"""Application configuration."""

from decimal import Decimal
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "Staffplan Backend"
    app_env: str = "development"
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Time grid
    hours_per_business_day: int = Field(default=8, ge=1, le=24)
    grid_month_count: int = Field(default=18, ge=1, le=120)

    # Allocation rules. The click cycle visits 0 -> full -> partial -> 0.
    capacity_ceiling_percent: int = Field(default=100, ge=1)
    click_cycle_full_percent: int = Field(default=100, ge=1)
    click_cycle_partial_percent: int = Field(default=50, ge=1)
    drag_paint_percent: int = Field(default=100, ge=1)

    # Placeholder business rule: revenue = cost * markup.
    revenue_markup: Decimal = Field(default=Decimal("1.3"), ge=0)
    fte_display_places: int = Field(default=1, ge=0, le=4)

    # Populate the in-memory workspace with the demo roster on startup.
    seed_demo_data: bool = False

    openai_api_key: str = ""
    narrative_model: str = "gpt-4o-mini"
    narrative_temperature: float = Field(default=0.4, ge=0, le=2)

    # Keep .env support for comma-separated values (non-JSON).
    allowed_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""

    return Settings()
