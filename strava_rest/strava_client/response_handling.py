"""Shared HTTP response helpers for Strava API interactions."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

from requests.structures import CaseInsensitiveDict

from ..models import ResponseEnvelope

LOGGER = logging.getLogger(__name__)

SUCCESS_STATUSES = frozenset({200, 201})

__all__ = [
    "SUCCESS_STATUSES",
    "extract_error",
    "is_success_status",
    "shape_response",
]


def is_success_status(status: Optional[int]) -> bool:
    return status in SUCCESS_STATUSES


def shape_response(response: Any) -> Union[ResponseEnvelope, str]:
    """Build a :class:`ResponseEnvelope` from a transport response.

    A plain string (route exports) is returned unchanged. Otherwise the
    status code and headers are copied and the body is decoded as JSON; a
    body that is empty or not JSON yields ``None`` rather than an error.
    """

    if isinstance(response, str):
        return response

    status = response.status_code
    envelope = ResponseEnvelope(
        status=status,
        headers=CaseInsensitiveDict(response.headers or {}),
        body=_safe_json(response),
        success=is_success_status(status),
    )
    if not envelope.success:
        detail = extract_error(response, envelope.body)
        LOGGER.info(
            "Strava responded %s for %s%s",
            status,
            getattr(response, "url", "?"),
            f" | {detail}" if detail else "",
        )
    return envelope


def extract_error(resp: Any, data: Any = None) -> Optional[str]:
    """Return compact string with Strava error info (message + codes) if present."""

    if resp is None:
        return None
    if data is None:
        return _extract_error_text(resp)
    if not isinstance(data, dict):
        return None
    parts = _collect_error_parts(data)
    return " | ".join(parts) if parts else None


def _safe_json(resp: Any) -> Optional[Any]:
    """Safely parse JSON; return None if parsing fails."""

    try:
        return resp.json()
    except ValueError as exc:
        # requests' JSONDecodeError subclasses ValueError.
        LOGGER.debug(
            "Failed to decode JSON from %s: %s", getattr(resp, "url", "?"), exc
        )
        return None


def _extract_error_text(resp: Any) -> Optional[str]:
    """Best-effort plain-text extraction when JSON parsing fails."""

    text = getattr(resp, "text", "")
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    return (trimmed[:297] + "...") if len(trimmed) > 300 else trimmed


def _collect_error_parts(data: Dict[str, Any]) -> List[str]:
    """Build error snippets from the standard Strava error response."""

    parts: List[str] = []
    message = data.get("message")
    if message:
        parts.append(str(message))
    errors = data.get("errors")
    if isinstance(errors, list):
        for err in errors:
            if not isinstance(err, dict):
                continue
            resource = err.get("resource")
            field = err.get("field")
            code = err.get("code")
            target = "/".join(filter(None, (resource, field)))
            if code and target:
                parts.append(f"{target}:{code}")
            elif code:
                parts.append(str(code))
    return parts
