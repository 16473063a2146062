"""Runtime configuration and logging setup."""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    return value if value not in (None, "") else default


@dataclass(frozen=True)
class Settings:
    """Settings for the database and the order-management API."""

    database_url: str = field(
        default_factory=lambda: _env("DATABASE_URL", "sqlite:///./tours.db")
    )
    order_api_url: str = field(
        default_factory=lambda: _env("ORDER_API_URL", "https://public-api.shiphero.com/graphql")
    )
    order_auth_url: str = field(
        default_factory=lambda: _env("ORDER_AUTH_URL", "https://public-api.shiphero.com/auth")
    )
    order_api_refresh_token: Optional[str] = field(
        default_factory=lambda: _env("ORDER_API_REFRESH_TOKEN")
    )
    order_api_timeout_seconds: float = field(
        default_factory=lambda: float(_env("ORDER_API_TIMEOUT_SECONDS", "30"))
    )
    vendor_id: str = field(default_factory=lambda: _env("ORDER_VENDOR_ID", "1076735"))
    shop_name: str = field(default_factory=lambda: _env("ORDER_SHOP_NAME", "Touring App"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))


def get_settings() -> Settings:
    """Return the active configuration."""

    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Install the root log handler used by scripts and workers."""
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
