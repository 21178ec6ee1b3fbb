"""Client for the Strava v3 REST API."""

from .errors import ServiceError
from .models import ResponseEnvelope, Verbosity
from .strava_client import APIClient, HTTPTransport, shape_response

__all__ = [
    "APIClient",
    "HTTPTransport",
    "ResponseEnvelope",
    "ServiceError",
    "Verbosity",
    "shape_response",
]
