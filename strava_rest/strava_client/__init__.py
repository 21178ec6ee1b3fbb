"""Strava REST client components (session, transport, response shaping)."""

from .response_handling import shape_response  # noqa: F401
from .rest import APIClient  # noqa: F401
from .session import create_default_session  # noqa: F401
from .transport import HTTPTransport  # noqa: F401
