"""
Centralized configuration with environment variable overrides.

Booking policy windows, cancellation fee tiers, notification dispatch and
store settings are configurable here. Nothing is hardcoded in scheduling or
service logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

STORE_BACKENDS = ("memory", "file")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


def _safe_bool(env_var: str, default: str) -> bool:
    """Parse a boolean flag (1/0, true/false, yes/no, on/off)."""
    raw = os.getenv(env_var, default).strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"Invalid boolean for {env_var}: {raw!r}")


@dataclass(frozen=True)
class BookingPolicyConfig:
    """Lead-time windows and the cancellation fee schedule."""

    cancellation_window_hours: float = _safe_float("CANCELLATION_WINDOW_HOURS", "24")
    modification_window_hours: float = _safe_float("MODIFICATION_WINDOW_HOURS", "48")
    short_notice_days: int = _safe_int("SHORT_NOTICE_DAYS", "7")
    medium_notice_days: int = _safe_int("MEDIUM_NOTICE_DAYS", "30")
    short_notice_fee_rate: float = _safe_float("SHORT_NOTICE_FEE_RATE", "0.50")
    medium_notice_fee_rate: float = _safe_float("MEDIUM_NOTICE_FEE_RATE", "0.25")
    long_notice_fee_rate: float = _safe_float("LONG_NOTICE_FEE_RATE", "0.10")
    min_duration_hours: float = _safe_float("MIN_DURATION_HOURS", "0.5")
    max_duration_hours: float = _safe_float("MAX_DURATION_HOURS", "24")


@dataclass(frozen=True)
class NotificationConfig:
    """Outbound notification settings."""

    admin_email: str = os.getenv("ADMIN_EMAIL", "admin@lenslink.local")
    sender_address: str = os.getenv("MAIL_FROM", "LensLink <no-reply@lenslink.local>")
    async_dispatch: bool = _safe_bool("NOTIFY_ASYNC", "true")
    max_workers: int = _safe_int("NOTIFY_MAX_WORKERS", "2")


@dataclass(frozen=True)
class StoreConfig:
    """Which entity store adapter to build and where it keeps its data."""

    backend: str = os.getenv("STORE_BACKEND", "memory")
    data_dir: str = os.getenv("STORE_DATA_DIR", "./data")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    policy: BookingPolicyConfig = field(default_factory=BookingPolicyConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    app_name: str = os.getenv("APP_NAME", "LensLink")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    policy = config.policy
    if policy.cancellation_window_hours < 0:
        raise ValueError(
            f"CANCELLATION_WINDOW_HOURS must be >= 0, got {policy.cancellation_window_hours}"
        )
    if policy.modification_window_hours < 0:
        raise ValueError(
            f"MODIFICATION_WINDOW_HOURS must be >= 0, got {policy.modification_window_hours}"
        )
    if policy.short_notice_days < 1:
        raise ValueError(f"SHORT_NOTICE_DAYS must be >= 1, got {policy.short_notice_days}")
    if policy.medium_notice_days <= policy.short_notice_days:
        raise ValueError(
            "MEDIUM_NOTICE_DAYS must be greater than SHORT_NOTICE_DAYS, "
            f"got {policy.medium_notice_days} <= {policy.short_notice_days}"
        )

    for rate_name, rate_value in [
        ("SHORT_NOTICE_FEE_RATE", policy.short_notice_fee_rate),
        ("MEDIUM_NOTICE_FEE_RATE", policy.medium_notice_fee_rate),
        ("LONG_NOTICE_FEE_RATE", policy.long_notice_fee_rate),
    ]:
        if not 0.0 <= rate_value <= 1.0:
            raise ValueError(f"{rate_name} must be between 0.0 and 1.0, got {rate_value}")

    if not (
        policy.short_notice_fee_rate
        >= policy.medium_notice_fee_rate
        >= policy.long_notice_fee_rate
    ):
        raise ValueError("Cancellation fee rates must not increase with notice period")

    if not 0 < policy.min_duration_hours <= policy.max_duration_hours:
        raise ValueError(
            "Duration bounds must satisfy 0 < MIN_DURATION_HOURS <= MAX_DURATION_HOURS, "
            f"got {policy.min_duration_hours} and {policy.max_duration_hours}"
        )

    if config.notifications.max_workers < 1:
        raise ValueError(
            f"NOTIFY_MAX_WORKERS must be >= 1, got {config.notifications.max_workers}"
        )
    if config.store.backend not in STORE_BACKENDS:
        raise ValueError(
            f"STORE_BACKEND must be one of {STORE_BACKENDS}, got {config.store.backend!r}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info("Configuration loaded for '%s'", config.app_name)
    return config


# Singleton instance
settings = load_config()
