from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env if present
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    # Sanitizer profile used by guard.sanitize(): default | paragraph | plain_text
    HTMLGUARD_PROFILE: str = os.getenv("HTMLGUARD_PROFILE", "default")

    # Upper bound on input size; pattern scanning cost grows with input length
    HTMLGUARD_MAX_INPUT_BYTES: int = int(os.getenv("HTMLGUARD_MAX_INPUT_BYTES", str(1024 * 1024)))

    # Logging
    HTMLGUARD_LOG_LEVEL: str = os.getenv("HTMLGUARD_LOG_LEVEL", "INFO")
    HTMLGUARD_CONFIGURE_LOGGING: bool = _env_bool("HTMLGUARD_CONFIGURE_LOGGING", True)
