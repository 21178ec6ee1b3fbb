"""HTTP session factory for Strava API calls."""

from __future__ import annotations

import requests
from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import (
    HTTP_POOL_CONNECTIONS,
    HTTP_POOL_MAXSIZE,
    STRAVA_HTTP_BACKOFF_FACTOR,
    STRAVA_HTTP_MAX_RETRIES,
)

__all__ = ["create_default_session"]


def _build_retry(total: int = STRAVA_HTTP_MAX_RETRIES) -> Retry:
    # POST/PUT are left out: uploads and activity creation are not idempotent.
    return Retry(
        total=total,
        backoff_factor=STRAVA_HTTP_BACKOFF_FACTOR,
        status_forcelist=[500, 502, 503, 504],
        allowed_methods=["GET", "DELETE"],
        raise_on_status=False,
    )


def create_default_session(max_retries: int = STRAVA_HTTP_MAX_RETRIES) -> Session:
    session = requests.Session()
    adapter = HTTPAdapter(
        pool_connections=HTTP_POOL_CONNECTIONS,
        pool_maxsize=HTTP_POOL_MAXSIZE,
        max_retries=_build_retry(max_retries),
    )
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update(
        {
            "Accept-Encoding": "gzip, deflate",
            "Accept": "application/json",
        }
    )
    return session
