"""Access token helpers.

The client never acquires or refreshes tokens itself. It accepts either the
token string or any object that can hand one out (for example an OAuth
library's token object) and resolves it once at construction.
"""

from __future__ import annotations

from typing import Any

# Method names checked, in order, on token objects.
_TOKEN_GETTERS = ("get_token", "getToken")


def resolve_access_token(token: Any) -> str:
    """Return the bearer token string for ``token``.

    Args:
        token: A token string, or an object exposing ``get_token()`` (or
            ``getToken()``) that returns one.

    Raises:
        TypeError: If ``token`` is neither.
    """
    if isinstance(token, str):
        return token
    for name in _TOKEN_GETTERS:
        getter = getattr(token, name, None)
        if callable(getter):
            value = getter()
            if not isinstance(value, str):
                raise TypeError(
                    f"{type(token).__name__}.{name}() returned "
                    f"{type(value).__name__}, expected str"
                )
            return value
    raise TypeError(
        f"Access token must be a string or expose get_token(); got {type(token).__name__}"
    )


def mask_token(token: str, visible: int = 4) -> str:
    """Return ``token`` with all but the trailing ``visible`` chars masked."""

    if not token:
        return ""
    visible = max(0, visible)
    if visible == 0:
        return "*" * len(token)
    hidden_length = max(len(token) - visible, 0)
    if hidden_length == 0:
        return token
    return ("*" * hidden_length) + token[-visible:]
