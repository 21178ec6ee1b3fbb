"""Default HTTP transport for :class:`~strava_rest.strava_client.rest.APIClient`.

Any object with a compatible ``request(method, path, *, query=None,
files=None)`` method can be injected instead; this one wraps a pooled
``requests.Session``.
"""

from __future__ import annotations

import logging
import os
from contextlib import ExitStack
from pathlib import Path
from typing import IO, Any, Dict, Mapping, Optional, Tuple, Union

import requests

from ..config import REQUEST_TIMEOUT, STRAVA_BASE_URL, STRAVA_RAISE_FOR_STATUS
from .session import create_default_session

LOGGER = logging.getLogger(__name__)

FileSource = Union[str, "os.PathLike[str]", IO[bytes]]

__all__ = ["HTTPTransport", "FileSource", "build_url", "encode_query"]


def build_url(base_url: str, path: str) -> str:
    """Join a relative endpoint path onto the API base URL."""

    if path.startswith(("http://", "https://")):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def encode_query(query: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Drop ``None`` values and render booleans the way Strava expects."""

    encoded: Dict[str, Any] = {}
    for key, value in (query or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        encoded[key] = value
    return encoded


def _open_file(stack: ExitStack, source: FileSource) -> Tuple[str, IO[bytes]]:
    if isinstance(source, (str, os.PathLike)):
        path = Path(source)
        handle = stack.enter_context(open(path, "rb"))
        return path.name, handle
    name = os.path.basename(str(getattr(source, "name", "") or "upload"))
    return name, source


class HTTPTransport:
    """Send requests for relative Strava API paths through a requests session."""

    def __init__(
        self,
        *,
        base_url: str = STRAVA_BASE_URL,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT,
        raise_for_status: bool = STRAVA_RAISE_FOR_STATUS,
    ) -> None:
        self._owns_session = session is None
        self._session = session or create_default_session()
        self._base_url = base_url
        self._timeout = timeout
        self._raise_for_status = raise_for_status

    def request(
        self,
        method: str,
        path: str,
        *,
        query: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, FileSource]] = None,
    ) -> requests.Response:
        """Perform one HTTP request and return the raw response.

        File values may be paths (opened for the duration of the request) or
        open binary file objects (left open).

        Raises:
            requests.RequestException: On network failures, and on 4xx/5xx
                statuses when ``raise_for_status`` is enabled.
            OSError: If an upload file cannot be opened.
        """
        url = build_url(self._base_url, path)
        params = encode_query(query)
        with ExitStack() as stack:
            multipart = None
            if files:
                multipart = {
                    field: _open_file(stack, source) for field, source in files.items()
                }
            response = self._session.request(
                method,
                url,
                params=params,
                files=multipart,
                timeout=self._timeout,
            )
        LOGGER.debug("%s %s -> %s", method, path, response.status_code)
        if self._raise_for_status:
            response.raise_for_status()
        return response

    def close(self) -> None:
        """Close the underlying session if this transport created it."""

        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
