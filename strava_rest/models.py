"""Value types shared by the client: response verbosity and the response envelope."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict


class Verbosity(IntEnum):
    """How much of each HTTP response the client hands back."""

    # Decoded body only
    BASIC = 0
    # ResponseEnvelope with status, headers, body and success flag
    ENHANCED = 1

    @classmethod
    def coerce(cls, value: "Verbosity | int | str") -> "Verbosity":
        """Accept an enum member, its integer value or its name."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(f"Unknown response verbosity: {value!r}") from None
        return cls(value)


@dataclass(frozen=True)
class ResponseEnvelope:
    """Status, headers, decoded body and success flag of one API response.

    ``headers`` is case-insensitive, like ``requests.Response.headers``.
    """

    status: int
    headers: Dict[str, Any] = field(default_factory=dict)
    # Decoded JSON body, or None for empty / non-JSON payloads
    body: Any = None
    success: bool = False
