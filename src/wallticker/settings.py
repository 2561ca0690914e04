"""Environment-driven settings for wallticker.

A ticker is configured by exactly two durations. ``TickerSettings`` lets a
deployment supply them (and the log level) from ``WALLTICKER_*`` environment
variables or a ``.env`` file, validated once at startup.

Manifesto:
    Configuration should be explicit, validated, and environment-driven.

    - **Pydantic validation:** ``0 < accuracy < period`` checked at load time
    - **Environment-driven:** Reads from env vars and .env files
    - **Sensible defaults:** Every minute, on the minute, to the second

Examples:
    >>> from wallticker.settings import TickerSettings
    >>> settings = TickerSettings(period_seconds=300, accuracy_seconds=0.5)
    >>> settings.period
    datetime.timedelta(seconds=300)

Tags:
    settings, configuration, pydantic, environment, wallticker

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from datetime import timedelta

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TickerSettings(BaseSettings):
    """Ticker configuration.

    Fields
    ──────
    period_seconds   : Target cadence; boundaries are multiples of it since epoch
    accuracy_seconds : Sampling granularity and tolerated lateness
    log_level        : Structlog log level
    log_json         : JSON logs (True), console (False), auto-detect (None)
    """

    model_config = SettingsConfigDict(
        env_prefix="WALLTICKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Cadence ──────────────────────────────────────────────────
    period_seconds: float = Field(
        default=60.0, gt=0, allow_inf_nan=False, description="Tick period in seconds"
    )
    accuracy_seconds: float = Field(
        default=1.0, gt=0, allow_inf_nan=False, description="Tick accuracy in seconds"
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    @model_validator(mode="after")
    def _validate_cadence(self) -> TickerSettings:
        """Accuracy must fit strictly inside the period."""
        if self.accuracy_seconds >= self.period_seconds:
            raise ValueError(
                f"accuracy_seconds ({self.accuracy_seconds}) must be less than "
                f"period_seconds ({self.period_seconds})"
            )
        return self

    # ── Derived properties ───────────────────────────────────────

    @property
    def period(self) -> timedelta:
        return timedelta(seconds=self.period_seconds)

    @property
    def accuracy(self) -> timedelta:
        return timedelta(seconds=self.accuracy_seconds)


_settings_cache: dict[str, TickerSettings] = {}


def get_settings(*, _force_reload: bool = False) -> TickerSettings:
    """Return the cached settings, loading them on first use."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = TickerSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = [
    "TickerSettings",
    "get_settings",
    "clear_settings_cache",
]
