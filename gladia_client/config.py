"""Configuration defaults and .env loading.

WHY: Centralizes every configurable value (endpoint, polling budget, CLI
defaults) so it is easy to find and override. Keeping the API key in the
environment keeps it out of source code and shell history.

HOW: python-dotenv loads the .env file on import. Constants are read from
environment variables with hard-coded fallbacks. load_api_key() gives a
clear error when the key is missing.

RULES:
- API key comes from GLADIA_API_KEY, never hardcoded
- Polling defaults (2s x 60 attempts) give a ~2 minute budget
- Explicit constructor/CLI arguments always win over these values
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from gladia_client.api.errors import GladiaError

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# API configuration defaults
# ---------------------------------------------------------------------------

GLADIA_BASE_URL = os.getenv("GLADIA_BASE_URL", "https://api.gladia.io")
DEFAULT_POLLING_INTERVAL_S = float(os.getenv("GLADIA_POLLING_INTERVAL", "2.0"))
DEFAULT_MAX_RETRIES = int(os.getenv("GLADIA_MAX_RETRIES", "60"))

DEFAULT_LANGUAGE = os.getenv("GLADIA_LANGUAGE") or None
_DIARIZATION_ENV = os.getenv("GLADIA_DIARIZATION", "").strip().lower()
# None when unset so the field is left out of requests.
DEFAULT_DIARIZATION = (_DIARIZATION_ENV == "true") if _DIARIZATION_ENV else None

# ---------------------------------------------------------------------------
# Service limits, used in friendlier error messages
# ---------------------------------------------------------------------------

MAX_UPLOAD_SIZE_MB = 500
SUPPORTED_FORMATS_HINT = "mp3, wav, mp4, etc."

DEFAULT_UPLOAD_EXTENSION = "mp3"


def load_api_key() -> str:
    """Load the Gladia API key from the environment.

    RULES:
    - Raises GladiaError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("GLADIA_API_KEY", "").strip()
    if not key:
        raise GladiaError(
            "API key is required. Pass api_key= or set GLADIA_API_KEY "
            "in the environment or a .env file."
        )
    return key
