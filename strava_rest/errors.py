"""Error types raised by the Strava REST client."""

from __future__ import annotations


class ServiceError(RuntimeError):
    """Raised when a request to the Strava API could not be completed.

    Wraps whatever the transport raised (network failure, HTTP error raised by
    the transport, unreadable upload file). The original exception is kept as
    ``__cause__``.
    """

    PREFIX = "[SERVICE] "

    @classmethod
    def wrap(cls, exc: BaseException) -> "ServiceError":
        return cls(f"{cls.PREFIX}{exc}")


__all__ = ["ServiceError"]
