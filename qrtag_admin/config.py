"""
Runtime configuration for the admin backend.

Values come from environment variables and are read once at import time.
Invalid numeric values fall back to their defaults with a warning.
"""

import logging
import os
from typing import List

logger = logging.getLogger(__name__)


def _int_from_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        logger.warning("Invalid %s value; falling back to default %s", name, default)
        return default


def _float_from_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except (TypeError, ValueError):
        logger.warning("Invalid %s value; falling back to default %s", name, default)
        return default


def _list_from_env(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class ApiConfig:
    """Centralized settings with environment variable overrides"""

    # Upstream QR platform API
    BASE_URL = os.getenv("QRTAG_API_URL", "http://localhost:9000/api/")
    ADMIN_API_KEY = os.getenv("QRTAG_ADMIN_API_KEY", "")
    TIMEOUT_SECONDS = _float_from_env("QRTAG_API_TIMEOUT", 10.0)

    # Debounce windows used by the list pages and the sale form
    SEARCH_DEBOUNCE_MS = _int_from_env("QRTAG_SEARCH_DEBOUNCE_MS", 400)
    VERIFY_DEBOUNCE_MS = _int_from_env("QRTAG_VERIFY_DEBOUNCE_MS", 600)

    DEFAULT_PAGE_SIZE = _int_from_env("QRTAG_DEFAULT_PAGE_SIZE", 10)
    WALLET_PAGE_SIZE = _int_from_env("QRTAG_WALLET_PAGE_SIZE", 20)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    CORS_ORIGINS = _list_from_env(
        "QRTAG_CORS_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
    )


if not ApiConfig.ADMIN_API_KEY:
    logger.info("QRTAG_ADMIN_API_KEY not set. Upstream requests will omit X-Admin-Api-Key.")
