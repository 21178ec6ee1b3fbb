"""Global pytest fixtures & helpers.

Adds project root to path and provides fake HTTP responses and transports so
no test touches the network.
"""
from __future__ import annotations

import json
import os
import sys

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from strava_rest.strava_client import APIClient


class FakeResp:
    """Minimal fake response matching needed parts of requests.Response."""

    def __init__(self, status_code=200, data=None, headers=None, text=None):
        self.status_code = status_code
        self._data = data
        self.headers = headers or {}
        self._text = text
        self.url = "https://www.strava.com/api/v3/fake"

    def json(self):
        if self._text is not None:
            return json.loads(self._text)
        if self._data is None:
            raise ValueError("No JSON body")
        return self._data

    @property
    def text(self):
        if self._text is not None:
            return self._text
        return "" if self._data is None else json.dumps(self._data)


class FakeTransport:
    """Records every request and replays a canned response."""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else FakeResp(200, data={})
        self.error = error
        self.calls = []

    def request(self, method, path, **parameters):
        self.calls.append((method, path, parameters))
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return APIClient("tok123", transport)


@pytest.fixture
def make_resp():
    return FakeResp


@pytest.fixture
def make_transport():
    return FakeTransport
