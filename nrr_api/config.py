# nrr_api/config.py
from __future__ import annotations

import os
from typing import List

from dotenv import load_dotenv

# Load .env from project root
load_dotenv()


def _get_env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: str = "") -> List[str]:
    return [item.strip() for item in _get_env(name, default).split(",") if item.strip()]


# -------------------------
# Logging
# -------------------------
LOG_LEVEL: str = _get_env("LOG_LEVEL", "INFO").upper()
_VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


# -------------------------
# Standings snapshot
# -------------------------
# Empty -> built-in seed table
STANDINGS_CSV_PATH: str = _get_env("STANDINGS_CSV_PATH")


# -------------------------
# Match format
# -------------------------
DEFAULT_MATCH_OVERS: int = _get_env_int("DEFAULT_MATCH_OVERS", 20)
MAX_MATCH_OVERS: int = _get_env_int("MAX_MATCH_OVERS", 50)


# -------------------------
# CORS
# -------------------------
# Comma separated; "*" lets any browser origin call the API
CORS_ALLOW_ORIGINS: List[str] = _get_env_list("CORS_ALLOW_ORIGINS", "*")


def validate_config() -> None:
    if LOG_LEVEL not in _VALID_LOG_LEVELS:
        raise RuntimeError(f"LOG_LEVEL must be one of {sorted(_VALID_LOG_LEVELS)}")

    if STANDINGS_CSV_PATH and not os.path.isfile(STANDINGS_CSV_PATH):
        raise RuntimeError(f"STANDINGS_CSV_PATH does not exist: {STANDINGS_CSV_PATH}")

    if DEFAULT_MATCH_OVERS <= 0:
        raise RuntimeError("DEFAULT_MATCH_OVERS must be positive")

    if MAX_MATCH_OVERS <= 0:
        raise RuntimeError("MAX_MATCH_OVERS must be positive")

    if DEFAULT_MATCH_OVERS > MAX_MATCH_OVERS:
        raise RuntimeError("DEFAULT_MATCH_OVERS cannot exceed MAX_MATCH_OVERS")

    if not CORS_ALLOW_ORIGINS:
        raise RuntimeError("CORS_ALLOW_ORIGINS must list at least one origin")
