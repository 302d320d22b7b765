"""Unit tests for the control-plane API client."""

from unittest.mock import MagicMock

import pytest
import requests

from anchor_client.config import Settings
from anchor_client.utils.api_client import ControlPlaneClient
from anchor_client.utils.exceptions import (
    ApiConnectionError,
    ApiResponseError,
    ApiTimeoutError,
)

BASE_URL = "http://control-plane.test/api/v1"


def make_response(payload=None, status_code=200, reason="OK", invalid_json=False):
    """Build a mock requests response."""
    response = MagicMock()
    response.ok = 200 <= status_code < 400
    response.status_code = status_code
    response.reason = reason
    if invalid_json:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    """Mock HTTP session."""
    return MagicMock()


@pytest.fixture
def client(settings, session):
    """Create client with a mocked session."""
    client = ControlPlaneClient(settings)
    client._session = session
    return client


@pytest.mark.asyncio
async def test_unwraps_envelope(client, session):
    """Test a successful envelope returns its data."""
    session.request.return_value = make_response({"success": True, "data": [{"id": "a"}]})

    data = await client.get_all_containers()

    assert data == [{"id": "a"}]
    method, url = session.request.call_args[0]
    assert method == "GET"
    assert url == f"{BASE_URL}/containers/all"
    assert session.request.call_args[1]["timeout"] == (5.0, 30.0)


@pytest.mark.asyncio
async def test_success_without_data(client, session):
    """Test an envelope without data returns None."""
    session.request.return_value = make_response({"success": True})

    assert await client.start_container("abc") is None
    assert session.request.call_args[0] == ("POST", f"{BASE_URL}/containers/abc/start")


@pytest.mark.asyncio
async def test_failed_envelope_raises_server_message(client, session):
    """Test success=false surfaces the server message."""
    session.request.return_value = make_response(
        {"success": False, "error": {"message": "No such container: abc"}}
    )

    with pytest.raises(ApiResponseError, match="No such container: abc"):
        await client.stop_container("abc")


@pytest.mark.asyncio
async def test_failed_envelope_without_message(client, session):
    """Test success=false without a message uses a generic one."""
    session.request.return_value = make_response({"success": False})

    with pytest.raises(ApiResponseError, match="API request failed"):
        await client.get_system_info()


@pytest.mark.asyncio
async def test_http_error_uses_server_message(client, session):
    """Test non-2xx responses prefer the envelope message."""
    session.request.return_value = make_response(
        {"success": False, "error": {"message": "image is in use"}},
        status_code=409,
        reason="Conflict",
    )

    with pytest.raises(ApiResponseError) as exc_info:
        await client.remove_image("sha256:1111")

    assert str(exc_info.value) == "image is in use"
    assert exc_info.value.status_code == 409


@pytest.mark.asyncio
async def test_http_error_falls_back_to_status_line(client, session):
    """Test non-2xx responses without a body use the status line."""
    session.request.return_value = make_response(
        status_code=500, reason="Internal Server Error", invalid_json=True
    )

    with pytest.raises(ApiResponseError, match="HTTP 500: Internal Server Error"):
        await client.get_all_images()


@pytest.mark.asyncio
async def test_http_error_with_string_error(client, session):
    """Test a plain string error from a proxy is used as the message."""
    session.request.return_value = make_response(
        {"error": "Bad gateway"}, status_code=502, reason="Bad Gateway"
    )

    with pytest.raises(ApiResponseError) as exc_info:
        await client.get_all_images()

    assert str(exc_info.value) == "Bad gateway"
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_http_error_with_unusable_error_falls_back(client, session):
    """Test an error that is neither object nor string uses the status line."""
    session.request.return_value = make_response(
        {"error": ["x"]}, status_code=502, reason="Bad Gateway"
    )

    with pytest.raises(ApiResponseError, match="HTTP 502: Bad Gateway"):
        await client.get_all_images()


@pytest.mark.asyncio
async def test_failed_envelope_with_string_error(client, session):
    """Test success=false with a string error surfaces that string."""
    session.request.return_value = make_response({"success": False, "error": "nope"})

    with pytest.raises(ApiResponseError) as exc_info:
        await client.get_all_images()

    assert str(exc_info.value) == "nope"


@pytest.mark.asyncio
async def test_failed_envelope_with_blank_string_error(client, session):
    """Test success=false with a blank string error uses the generic message."""
    session.request.return_value = make_response({"success": False, "error": "  "})

    with pytest.raises(ApiResponseError, match="API request failed"):
        await client.get_all_images()


@pytest.mark.asyncio
async def test_non_envelope_body(client, session):
    """Test a 2xx body that is not an envelope is rejected."""
    session.request.return_value = make_response(["not", "an", "envelope"])

    with pytest.raises(ApiResponseError, match="Invalid response"):
        await client.get_all_volumes()


@pytest.mark.asyncio
async def test_timeout_maps_to_timeout_error(client, session):
    """Test transport timeouts."""
    session.request.side_effect = requests.exceptions.ReadTimeout("slow")

    with pytest.raises(ApiTimeoutError) as exc_info:
        await client.get_all_containers()

    assert "timed out" in str(exc_info.value)
    assert isinstance(exc_info.value, ApiConnectionError)


@pytest.mark.asyncio
async def test_connect_timeout_is_a_timeout(client, session):
    """Test connect timeouts are timeouts, not connection failures."""
    session.request.side_effect = requests.exceptions.ConnectTimeout("slow")

    with pytest.raises(ApiTimeoutError):
        await client.get_all_containers()


@pytest.mark.asyncio
async def test_connection_error(client, session):
    """Test unreachable servers."""
    session.request.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(ApiConnectionError) as exc_info:
        await client.test_connection()

    assert str(exc_info.value) == (
        f"Cannot connect to control-plane API at {BASE_URL}. "
        "Make sure the API server is running."
    )


@pytest.mark.asyncio
async def test_force_flag_is_a_query_parameter(client, session):
    """Test force removal sends force=true."""
    session.request.return_value = make_response({"success": True})

    await client.remove_container("abc", force=True)
    assert session.request.call_args[1]["params"] == {"force": "true"}

    await client.remove_volume("pg-data")
    assert session.request.call_args[1]["params"] is None
    assert session.request.call_args[0] == ("DELETE", f"{BASE_URL}/volumes/pg-data")


@pytest.mark.asyncio
async def test_request_bodies(client, session):
    """Test JSON bodies of pull and volume creation."""
    session.request.return_value = make_response({"success": True})

    await client.pull_image("alpine:3.19")
    assert session.request.call_args[1]["json"] == {"imageName": "alpine:3.19"}

    await client.create_volume("cache")
    assert session.request.call_args[1]["json"] == {
        "name": "cache",
        "driver": "local",
        "options": {},
    }


@pytest.mark.asyncio
async def test_logs_line_count(client, session):
    """Test the log line count is sent as a parameter."""
    session.request.return_value = make_response({"success": True, "data": "log"})

    assert await client.get_container_logs("abc", 25) == "log"
    assert session.request.call_args[1]["params"] == {"lines": 25}


def test_path_segments_are_quoted(client):
    """Test identifiers cannot inject path segments."""
    assert client._url("images", "sha256:1111") == f"{BASE_URL}/images/sha256%3A1111"
    assert client._url("volumes", "a/b") == f"{BASE_URL}/volumes/a%2Fb"


def test_close_releases_session(client, session):
    """Test closing the client closes the session."""
    client.close()

    session.close.assert_called_once()
    assert client._session is None


@pytest.mark.asyncio
async def test_pull_and_build_use_long_operation_timeout(client, session):
    """Test image pulls and builds get the long read timeout."""
    session.request.return_value = make_response({"success": True})

    await client.pull_image("alpine:3.19")
    assert session.request.call_args[1]["timeout"] == (5.0, 600.0)

    await client.build_image(".", "Dockerfile", "app:dev")
    assert session.request.call_args[1]["timeout"] == (5.0, 600.0)


@pytest.mark.asyncio
async def test_regular_calls_keep_default_timeout(client, session):
    """Test other calls keep the regular read timeout."""
    session.request.return_value = make_response({"success": True})

    await client.remove_image("sha256:1111")

    assert session.request.call_args[1]["timeout"] == (5.0, 30.0)


@pytest.mark.asyncio
async def test_long_operation_timeout_is_configurable(session):
    """Test the long read timeout comes from settings."""
    settings = Settings(api_base_url=BASE_URL, long_operation_timeout_s=1200)
    client = ControlPlaneClient(settings)
    client._session = session
    session.request.return_value = make_response({"success": True})

    await client.pull_image("alpine:3.19")

    assert session.request.call_args[1]["timeout"] == (5.0, 1200.0)
