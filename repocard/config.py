"""
Environment configuration.

Environment Variables:
  ACCESS_TOKEN (optional) : Personal token. Falls back to GITHUB_TOKEN, then PAT_1.
  GQL_MAX_RETRIES         : Attempts per GraphQL request. Default 3.
  GQL_RETRY_BACKOFF       : Base of the exponential backoff (seconds). Default 1.5.
  CACHE_SECONDS (optional): Overrides the cache_seconds query parameter.
  WHITELIST (optional)    : Comma separated usernames. When set, only these are served.
  BLACKLIST (optional)    : Comma separated usernames added to the built-in blacklist.
  DEBUG                   : '1' => debug logging.
"""

from __future__ import annotations
import os
from typing import List, Optional


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, str(default)))
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, str(default)))
    except ValueError:
        return default


def _list_env(name: str) -> Optional[List[str]]:
    raw = os.environ.get(name)
    if raw is None:
        return None
    return [item.strip() for item in raw.split(",") if item.strip()]


# ------------------ Config & Env ------------------
ACCESS_TOKEN = os.environ.get("ACCESS_TOKEN") or os.environ.get("GITHUB_TOKEN") or os.environ.get("PAT_1")
GRAPHQL_URL = os.environ.get("GITHUB_GRAPHQL_URL", "https://api.github.com/graphql")

DEBUG = os.environ.get("DEBUG", "0") == "1"
MAX_RETRIES = _int_env("GQL_MAX_RETRIES", 3)
RETRY_BACKOFF = _float_env("GQL_RETRY_BACKOFF", 1.5)
REQUEST_TIMEOUT = _int_env("GQL_TIMEOUT", 40)

# Cache windows (seconds)
FIVE_MINUTES = 300
TEN_MINUTES = 600
ONE_DAY = 86400
TWELVE_HOURS = 43200
ERROR_CACHE_SECONDS = TEN_MINUTES

CACHE_SECONDS = os.environ.get("CACHE_SECONDS")

WHITELIST = _list_env("WHITELIST")
BLACKLIST = ["renovate-bot", "technote-space", "sw-yx"] + (_list_env("BLACKLIST") or [])
