import io

import pytest
import requests

from strava_rest.strava_client.transport import HTTPTransport, build_url, encode_query


class RecordingSession:
    def __init__(self, response):
        self.response = response
        self.calls = []
        self.closed = False

    def request(self, method, url, **kwargs):
        files = kwargs.get("files") or {}
        # Capture file state while the request is in flight.
        kwargs["_file_state"] = {
            field: (name, handle.closed, handle.read()) for field, (name, handle) in files.items()
        }
        self.calls.append((method, url, kwargs))
        return self.response

    def close(self):
        self.closed = True


def test_build_url_joins_relative_paths():
    base = "https://www.strava.com/api/v3"
    assert build_url(base, "athlete") == "https://www.strava.com/api/v3/athlete"
    assert build_url(base + "/", "/athletes/1") == "https://www.strava.com/api/v3/athletes/1"
    assert build_url(base, "https://example.test/x") == "https://example.test/x"


def test_encode_query_drops_none_and_lowercases_bools():
    assert encode_query({"a": None, "b": True, "c": False, "d": 0, "e": "x"}) == {
        "b": "true",
        "c": "false",
        "d": 0,
        "e": "x",
    }
    assert encode_query(None) == {}


def test_request_sends_query_and_timeout(make_resp):
    session = RecordingSession(make_resp(200, data={}))
    transport = HTTPTransport(session=session, base_url="https://api.test/v3", timeout=3)

    response = transport.request("GET", "athlete", query={"access_token": "t", "page": None})

    assert response is session.response
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("GET", "https://api.test/v3/athlete")
    assert kwargs["params"] == {"access_token": "t"}
    assert kwargs["timeout"] == 3
    assert kwargs["files"] is None


def test_request_opens_and_closes_upload_paths(make_resp, tmp_path):
    upload = tmp_path / "ride.gpx"
    upload.write_bytes(b"<gpx/>")
    session = RecordingSession(make_resp(201, data={"id": 1}))
    transport = HTTPTransport(session=session)

    transport.request("POST", "uploads", query={"access_token": "t"}, files={"file": str(upload)})

    state = session.calls[0][2]["_file_state"]
    assert state["file"] == ("ride.gpx", False, b"<gpx/>")
    handle = session.calls[0][2]["files"]["file"][1]
    assert handle.closed


def test_request_leaves_caller_file_objects_open(make_resp):
    session = RecordingSession(make_resp(201, data={}))
    stream = io.BytesIO(b"FIT")
    stream.name = "/tmp/watch/track.fit"

    HTTPTransport(session=session).request("POST", "uploads", files={"file": stream})

    assert session.calls[0][2]["_file_state"]["file"] == ("track.fit", False, b"FIT")
    assert not stream.closed


def test_missing_upload_file_raises_oserror(make_resp, tmp_path):
    transport = HTTPTransport(session=RecordingSession(make_resp()))
    with pytest.raises(OSError):
        transport.request("POST", "uploads", files={"file": str(tmp_path / "nope.fit")})


def test_raise_for_status_option():
    class ErrorResp:
        status_code = 500

        def raise_for_status(self):
            raise requests.HTTPError("500 Server Error")

    session = RecordingSession(ErrorResp())
    assert HTTPTransport(session=session).request("GET", "athlete").status_code == 500
    with pytest.raises(requests.HTTPError):
        HTTPTransport(session=session, raise_for_status=True).request("GET", "athlete")


def test_close_leaves_injected_session_alone(make_resp):
    session = RecordingSession(make_resp())
    with HTTPTransport(session=session):
        pass
    assert not session.closed


def test_owned_session_is_closed(monkeypatch, make_resp):
    session = RecordingSession(make_resp())
    monkeypatch.setattr(
        "strava_rest.strava_client.transport.create_default_session", lambda: session
    )
    with HTTPTransport() as transport:
        transport.request("GET", "athlete")
    assert session.closed
