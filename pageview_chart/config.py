"""Configuration module for the pageview chart.

This module centralizes the reading of environment variables and provides a
`Settings` object that other modules can import.  It uses Pydantic's
`BaseSettings` to automatically read values from a `.env` file when present.

Localized labels are configuration too: the tooltip never looks strings up
from a global, it receives a `ChartLabels` built from these settings (or from
a caller-supplied mapping).
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_VISITORS_LABEL = "Visitors"
DEFAULT_PAGEVIEWS_LABEL = "Pageviews"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="allow", populate_by_name=True)

    stats_base_url: str = Field(
        default="http://localhost:8080/wp-json/zero-pageviews/v1",
        validation_alias=AliasChoices("STATS_BASE_URL", "WP_REST_URL"),
    )
    stats_nonce: str | None = Field(
        default=None,
        validation_alias=AliasChoices("STATS_NONCE", "WP_NONCE"),
    )
    refresh_interval_s: float = Field(default=60.0, validation_alias=AliasChoices("REFRESH_INTERVAL_S"))
    request_timeout_s: float = Field(default=8.0, validation_alias=AliasChoices("REQUEST_TIMEOUT_S"))
    max_retries: int = Field(default=3, validation_alias=AliasChoices("STATS_MAX_RETRIES"))
    chart_height: int | None = Field(default=None, validation_alias=AliasChoices("CHART_HEIGHT"))
    viewport_width: int = Field(default=1024, validation_alias=AliasChoices("VIEWPORT_WIDTH"))
    viewport_height: int = Field(default=768, validation_alias=AliasChoices("VIEWPORT_HEIGHT"))
    tooltip_width: float = Field(default=150.0, validation_alias=AliasChoices("TOOLTIP_WIDTH"))
    tooltip_height: float = Field(default=64.0, validation_alias=AliasChoices("TOOLTIP_HEIGHT"))
    timezone: str = Field(default="UTC", validation_alias=AliasChoices("CHART_TIMEZONE"))
    label_visitors: str = Field(default="Visitors", validation_alias=AliasChoices("LABEL_VISITORS"))
    label_pageviews: str = Field(default="Pageviews", validation_alias=AliasChoices("LABEL_PAGEVIEWS"))
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL"))

    @field_validator("stats_base_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().rstrip("/")
        return value

    @field_validator("refresh_interval_s")
    @classmethod
    def _positive_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Refresh interval must be positive.")
        return value


@dataclass(frozen=True, slots=True)
class ChartLabels:
    """Localized strings consumed verbatim by the tooltip."""

    visitors: str = DEFAULT_VISITORS_LABEL
    pageviews: str = DEFAULT_PAGEVIEWS_LABEL

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> "ChartLabels":
        """Build labels from an i18n mapping keyed by ``Visitors``/``Pageviews``."""

        if not payload:
            return cls()
        visitors = payload.get("Visitors")
        pageviews = payload.get("Pageviews")
        return cls(
            visitors=str(visitors) if visitors else DEFAULT_VISITORS_LABEL,
            pageviews=str(pageviews) if pageviews else DEFAULT_PAGEVIEWS_LABEL,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ChartLabels":
        return cls(visitors=settings.label_visitors, pageviews=settings.label_pageviews)


@lru_cache()
def get_settings() -> Settings:
    """Return a cached instance of the application settings.

    Pydantic caches the parsed environment variables so that repeated calls
    throughout the application are inexpensive.
    """

    return Settings()


__all__ = ["ChartLabels", "Settings", "get_settings"]
