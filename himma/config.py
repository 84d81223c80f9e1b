"""Himma configuration -- alert timings and runtime settings from env vars."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_bool(key: str, default: str) -> bool:
    return os.environ.get(key, default).lower() in ("true", "1", "yes")


@dataclass
class AlertConfig:
    """Timing and presentation settings for the alerting engine.

    All durations are in seconds.
    """

    toast_ttl: float = field(
        default_factory=lambda: float(os.environ.get("HIMMA_TOAST_TTL", "5.0"))
    )
    deadline_scan_interval: float = field(
        default_factory=lambda: float(
            os.environ.get("HIMMA_DEADLINE_SCAN_INTERVAL", "120.0")
        )
    )
    deadline_window_hours: float = field(
        default_factory=lambda: float(
            os.environ.get("HIMMA_DEADLINE_WINDOW_HOURS", "24")
        )
    )
    assignment_alert_delay: float = field(
        default_factory=lambda: float(
            os.environ.get("HIMMA_ASSIGNMENT_ALERT_DELAY", "15.0")
        )
    )
    assignment_alert_enabled: bool = field(
        default_factory=lambda: _env_bool("HIMMA_ASSIGNMENT_ALERT_ENABLED", "true")
    )
    sound_enabled: bool = field(
        default_factory=lambda: _env_bool("HIMMA_SOUND_ENABLED", "true")
    )


@dataclass
class HimmaConfig:
    """Top-level configuration for the Himma service."""

    alerts: AlertConfig = field(default_factory=AlertConfig)
    log_level: str = field(
        default_factory=lambda: os.environ.get("HIMMA_LOG_LEVEL", "INFO")
    )
    allowed_origins: list[str] = field(
        default_factory=lambda: os.environ.get(
            "ALLOWED_ORIGINS", "http://localhost:3000"
        ).split(",")
    )


# Singleton for convenience
_config: HimmaConfig | None = None


def get_config() -> HimmaConfig:
    """Get or create the global Himma configuration."""
    global _config
    if _config is None:
        _config = HimmaConfig()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
