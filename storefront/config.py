"""
Runtime settings for the storefront engine, CLI and backend.
"""
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from storefront.logging import get_logger

logger = get_logger(__name__)

load_dotenv()

DEFAULT_API_URL = "http://127.0.0.1:3000"
DEFAULT_PAGE_SIZE = 12


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive, using %s", name, raw, default)
        return default
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, raw, default)
        return default
    return value if value > 0 else default


@dataclass
class Settings:
    """Settings resolved from the environment (and .env if present)."""

    api_url: str = field(default_factory=lambda: os.getenv("DRIP_API_URL", DEFAULT_API_URL))
    storage_dir: str = field(default_factory=lambda: os.getenv("DRIP_STORAGE_DIR", ".drip-storage"))
    page_size: int = field(default_factory=lambda: _env_int("DRIP_PAGE_SIZE", DEFAULT_PAGE_SIZE))
    locale: str = field(default_factory=lambda: os.getenv("DRIP_LOCALE", "zh-TW"))
    timeout: float = field(default_factory=lambda: _env_float("DRIP_TIMEOUT", 10.0))
    products_path: Optional[str] = field(default_factory=lambda: os.getenv("DRIP_PRODUCTS_PATH"))


def get_settings() -> Settings:
    return Settings()
