"""Configuration constants and .env loading.

WHY: Centralizes the configurable values (API endpoint, timeouts, batch
failure policy) so they are easy to find, update, and override without
touching the request-building logic.

HOW: python-dotenv loads the .env file on import. Constants are read from
the environment once, at module level. The load_api_key() function
provides a clear error when the key is missing.

RULES:
- API key is loaded from .env via python-dotenv, never hardcoded
- All defaults can be overridden via environment variables
- Boolean env vars accept "true"/"false" (case-insensitive)
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


# ---------------------------------------------------------------------------
# API configuration defaults
# ---------------------------------------------------------------------------

GLADIA_BASE_URL = os.getenv("GLADIA_BASE_URL", "https://api.gladia.io")
GLADIA_TIMEOUT_S = float(os.getenv("GLADIA_TIMEOUT_S", "300"))
GLADIA_CONNECT_TIMEOUT_S = float(os.getenv("GLADIA_CONNECT_TIMEOUT_S", "30"))

API_KEY_HEADER = "x-gladia-key"
"""Header carrying the API key on every Gladia request."""

# ---------------------------------------------------------------------------
# Batch defaults
# ---------------------------------------------------------------------------

DEFAULT_CONTINUE_ON_FAIL = _env_bool("DEFAULT_CONTINUE_ON_FAIL", "false")
DEFAULT_BINARY_PROPERTY = os.getenv("DEFAULT_BINARY_PROPERTY", "data")
"""Binary property name used by uploads when the item names none."""


def load_api_key() -> str:
    """Load the Gladia API key from the environment.

    WHY: The key is required for all Gladia API calls. Loading it from
    the environment (via .env) keeps it out of source code.

    HOW: Reads GLADIA_API_KEY from os.environ (populated by python-dotenv).

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("GLADIA_API_KEY", "").strip()
    if not key:
        raise ValueError(
            "Gladia API key not configured. "
            "Add GLADIA_API_KEY to the .env file in the app folder."
        )
    return key
