import logging

import pytest
import requests

from strava_rest import APIClient, ResponseEnvelope, ServiceError, Verbosity

GPX = '<?xml version="1.0"?><gpx><rte><rtept lat="1" lon="2"/></rte></gpx>'


class TokenObject:
    def get_token(self):
        return "from-object"


def test_token_object_is_resolved_at_construction(transport):
    client = APIClient(TokenObject(), transport)
    client.get_athlete()
    assert transport.last[2]["query"]["access_token"] == "from-object"


def test_missing_transport_fails_fast():
    with pytest.raises(ValueError):
        APIClient("tok", None)


def test_unusable_token_is_rejected(transport):
    with pytest.raises(TypeError):
        APIClient(12345, transport)


def test_verbosity_accepts_names_and_ints(transport):
    assert APIClient("t", transport, "enhanced").verbosity is Verbosity.ENHANCED
    assert APIClient("t", transport, 0).verbosity is Verbosity.BASIC
    with pytest.raises(ValueError):
        APIClient("t", transport, "loud")


def test_basic_verbosity_returns_body(make_resp, make_transport):
    transport = make_transport(make_resp(200, data={"id": 42, "firstname": "Ann"}))
    client = APIClient("tok", transport)
    assert client.get_athlete(42) == {"id": 42, "firstname": "Ann"}


def test_basic_verbosity_returns_none_for_non_json(make_resp, make_transport):
    transport = make_transport(make_resp(204))
    client = APIClient("tok", transport)
    assert client.delete_activity(1) is None


def test_enhanced_verbosity_returns_envelope(make_resp, make_transport):
    transport = make_transport(
        make_resp(201, data={"id": 1}, headers={"X-RateLimit-Usage": "1,10"})
    )
    client = APIClient("tok", transport, Verbosity.ENHANCED)

    result = client.create_activity("Run", "Run", "2024-05-01T12:00:00Z", 60)

    assert result == ResponseEnvelope(
        status=201,
        headers={"X-RateLimit-Usage": "1,10"},
        body={"id": 1},
        success=True,
    )


@pytest.mark.parametrize("status, success", [(200, True), (201, True), (202, False), (404, False), (500, False)])
def test_enhanced_success_flag(make_resp, make_transport, status, success):
    transport = make_transport(make_resp(status, data={"message": "x"}))
    client = APIClient("tok", transport, Verbosity.ENHANCED)
    envelope = client.get_segment(1)
    assert envelope.status == status
    assert envelope.success is success


def test_http_error_status_is_not_raised(make_resp, make_transport):
    body = {"message": "Record Not Found", "errors": [{"resource": "Activity", "field": "id", "code": "invalid"}]}
    transport = make_transport(make_resp(404, data=body))
    client = APIClient("tok", transport)
    assert client.get_activity(1) == body


def test_transport_failure_raises_service_error(make_transport):
    transport = make_transport(error=requests.ConnectionError("connection refused"))
    client = APIClient("tok", transport)

    with pytest.raises(ServiceError) as excinfo:
        client.get_athlete()

    assert "connection refused" in str(excinfo.value)
    assert str(excinfo.value).startswith("[SERVICE] ")
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_http_error_raised_by_transport_is_wrapped(make_resp, make_transport):
    transport = make_transport(
        error=requests.HTTPError("401 Client Error: Unauthorized", response=make_resp(401))
    )
    client = APIClient("tok", transport, Verbosity.ENHANCED)
    with pytest.raises(ServiceError, match="Unauthorized"):
        client.get_athlete_zones()


@pytest.mark.parametrize("verbosity", [Verbosity.BASIC, Verbosity.ENHANCED])
def test_route_export_returns_text_in_both_modes(make_resp, make_transport, verbosity):
    transport = make_transport(make_resp(200, text=GPX, headers={"Content-Type": "application/gpx+xml"}))
    client = APIClient("tok", transport, verbosity)
    assert client.get_route_as_gpx(8) == GPX
    assert client.get_route_as_tcx(8) == GPX


@pytest.mark.parametrize("verbosity", [Verbosity.BASIC, Verbosity.ENHANCED])
def test_route_export_passes_plain_string_through(make_transport, verbosity):
    client = APIClient("tok", make_transport(GPX), verbosity)
    assert client.get_route_as_gpx(8) == GPX


def test_failed_route_export_is_shaped_like_other_calls(make_resp, make_transport):
    transport = make_transport(make_resp(404, data={"message": "Record Not Found"}))
    envelope = APIClient("tok", transport, Verbosity.ENHANCED).get_route_as_gpx(8)
    assert isinstance(envelope, ResponseEnvelope)
    assert envelope.success is False
    assert envelope.body == {"message": "Record Not Found"}


def test_access_token_is_masked_in_debug_logs(caplog, make_transport):
    client = APIClient("secret-token-abcd", make_transport())
    with caplog.at_level(logging.DEBUG, logger="strava_rest.strava_client.rest"):
        client.get_athlete()
    assert "secret-token" not in caplog.text
    assert "abcd" in caplog.text
