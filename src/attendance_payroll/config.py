"""Configuration management for attendance payroll."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from attendance_payroll.exceptions import ConfigurationError

if TYPE_CHECKING:
    from attendance_payroll.calculators.statutory import StatutorySchedule


def _env_decimal(name: str, default: str) -> Decimal:
    raw = os.getenv(name, default)
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ConfigurationError(f"{name} must be a decimal number, got {raw!r}") from None
    if not value.is_finite() or value <= 0:
        raise ConfigurationError(f"{name} must be a positive finite number, got {raw!r}")
    return value


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    database_url: str
    engine_version: str
    host: str
    port: int
    debug: bool
    log_level: str
    daily_standard_hours: Decimal
    overtime_multiplier: Decimal
    statutory_schedule_path: str | None = None

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        port_raw = os.getenv("PORT", "8000")
        try:
            port = int(port_raw)
        except ValueError:
            raise ConfigurationError(f"PORT must be an integer, got {port_raw!r}") from None

        return cls(
            database_url=os.getenv(
                "DATABASE_URL",
                "sqlite+aiosqlite:///./attendance_payroll.db",
            ),
            engine_version=os.getenv("ENGINE_VERSION", "1.0.0"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=port,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            daily_standard_hours=_env_decimal("DAILY_STANDARD_HOURS", "8.00"),
            overtime_multiplier=_env_decimal("OVERTIME_MULTIPLIER", "1.25"),
            statutory_schedule_path=os.getenv("STATUTORY_SCHEDULE_PATH") or None,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()


@lru_cache(maxsize=1)
def get_statutory_schedule() -> StatutorySchedule:
    """Get the statutory schedule in effect, from file if one is configured."""
    from attendance_payroll.calculators.statutory import default_schedule, load_schedule

    path = get_settings().statutory_schedule_path
    if path:
        return load_schedule(path)
    return default_schedule()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for entry points (CLI, server)."""
    logging.basicConfig(
        level=(level or get_settings().log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
