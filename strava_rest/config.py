"""Central configuration for the Strava REST client.

All values are constants imported by the transport and the tools. Adjust as
needed for your environment. Secrets are read from environment variables
(optionally via a local `.env`).
"""

from __future__ import annotations

import os

from dotenv import load_dotenv


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env from the current directory or any parent folder.
load_dotenv()


# ---------------------------------------------------------------------------
# Strava settings
# ---------------------------------------------------------------------------
# Base Strava API URL. Relative endpoint paths are joined onto it.
STRAVA_BASE_URL = os.getenv("STRAVA_BASE_URL", "https://www.strava.com/api/v3")

# Access token used by the CLI tools when --access-token is not given.
STRAVA_ACCESS_TOKEN = os.getenv("STRAVA_ACCESS_TOKEN", "")


# ---------------------------------------------------------------------------
# HTTP transport
# ---------------------------------------------------------------------------
# Request timeout in seconds.
REQUEST_TIMEOUT = _env_float("REQUEST_TIMEOUT", 15.0)

# HTTP session pool sizes.
HTTP_POOL_CONNECTIONS = _env_int("HTTP_POOL_CONNECTIONS", 10)
HTTP_POOL_MAXSIZE = _env_int("HTTP_POOL_MAXSIZE", 10)

# urllib3 retries on 5xx for idempotent verbs. Set to 0 to disable.
STRAVA_HTTP_MAX_RETRIES = _env_int("STRAVA_HTTP_MAX_RETRIES", 3)
STRAVA_HTTP_BACKOFF_FACTOR = _env_float("STRAVA_HTTP_BACKOFF_FACTOR", 1.0)

# Raise requests.HTTPError for 4xx/5xx instead of returning the response.
STRAVA_RAISE_FOR_STATUS = _env_bool("STRAVA_RAISE_FOR_STATUS", False)
