"""
SECURITY CONFIG
===============
Centralized security settings loaded from environment.
"""

# FLOW:
# - load_env_file() loads the active .env file once.
# - SECURITY_SETTINGS exposes startup values; encryption_mode() reads live.
# HOW:
# - Reads env vars through python-dotenv and stores them in a dict.

from __future__ import annotations

import logging
import os

import dotenv

from Security.encryption_errors import ConfigurationError


MODE_BEST_EFFORT = "best-effort"
MODE_MANDATORY = "mandatory"
ENCRYPTION_MODES = {MODE_BEST_EFFORT, MODE_MANDATORY}

_env_loaded = False


def get_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in {"true", "1", "yes"}


def _env_name() -> str:
    env = os.getenv("APP_ENV", "").strip().lower()
    if env in {"prod", "production"}:
        return ".env.production"
    if env in {"local", "localhost", "dev", "development"}:
        return ".env.localhost"
    return ".env"


def _env_path() -> str:
    root = os.path.dirname(os.path.dirname(__file__))
    return os.path.join(root, _env_name())


def load_env_file() -> None:
    """Load the active .env file once; real environment variables win."""
    global _env_loaded
    if _env_loaded:
        return
    _env_loaded = True
    path = _env_path()
    if dotenv.load_dotenv(path) and get_bool("APP_ENV_LOG"):
        logging.getLogger("security.env").info("Active env file: %s", path)


def encryption_mode() -> str:
    """Return the configured write policy for credentials that cannot be encrypted."""
    load_env_file()
    mode = os.getenv("ENCRYPTION_MODE", MODE_BEST_EFFORT).strip().lower()
    if mode not in ENCRYPTION_MODES:
        raise ConfigurationError(
            f"ENCRYPTION_MODE must be one of {sorted(ENCRYPTION_MODES)}, got {mode!r}"
        )
    return mode


def security_settings() -> dict:
    """Snapshot of the security settings as currently configured."""
    load_env_file()
    return {
        "ENCRYPTION_MODE": encryption_mode(),
        "VALIDATE_ENCRYPTION_ON_STARTUP": get_bool("VALIDATE_ENCRYPTION_ON_STARTUP", True),
        "PROMETHEUS_ENABLED": get_bool("PROMETHEUS_ENABLED", True),
    }
