"""
Logging setup for the storefront engine.

Usage:
    from storefront.logging import get_logger
    logger = get_logger(__name__)
"""
import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _get_log_level() -> int:
    level_name = os.environ.get("LOG_LEVEL", "WARNING").upper()
    return getattr(logging, level_name, logging.WARNING)


def _configure_root_logger() -> None:
    root = logging.getLogger()

    # Respect handlers installed by the host (pytest, uvicorn)
    if root.handlers:
        return

    root.setLevel(_get_log_level())
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(_get_log_level())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


_configure_root_logger()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
