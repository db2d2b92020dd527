"""Tests for the dashboard API client."""

from __future__ import annotations

import asyncio
import datetime

import aiohttp
import pytest
from yarl import URL

from custom_components.airthings_cloud.const import (
    DASHBOARD_CLIENT_SECRET,
    URL_AUTHORIZE,
    URL_TOKEN,
)
from custom_components.airthings_cloud.core.api_client import (
    STAGE_AUTHORIZE,
    STAGE_FETCH_STATISTICS,
    STAGE_LOGIN,
    AirthingsCloudApiClient,
    extract_authorization_code,
)
from custom_components.airthings_cloud.core.exceptions import (
    ApiException,
    AuthException,
    AuthorizationCodeException,
    MissingFieldException,
    ParseException,
    UnexpectedStatusException,
)
from custom_components.airthings_cloud.models import SampleWindow

from .common import FakeResponse, make_session


def test_extract_authorization_code():
    """Test the code is read from the redirect query."""
    code = extract_authorization_code("https://dashboard.airthings.com/?code=ABC123&state=xyz")
    assert code == "ABC123"


def test_extract_authorization_code_missing():
    """Test a redirect without code is rejected."""
    with pytest.raises(AuthorizationCodeException) as err:
        extract_authorization_code("https://dashboard.airthings.com/?state=xyz")
    assert err.value.stage == STAGE_AUTHORIZE


@pytest.mark.asyncio
async def test_login_success():
    """Test login posts the password grant and strips the token."""
    session = make_session(FakeResponse(payload={"access_token": "  bearer-1 \n"}))
    client = AirthingsCloudApiClient(session)

    token = await client.async_login("user@example.com", "hunter2")

    assert token == "bearer-1"
    args, kwargs = session.request.call_args
    assert args == ("POST", URL_TOKEN)
    assert kwargs["json"] == {
        "username": "user@example.com",
        "password": "hunter2",
        "grant_type": "password",
        "client_id": "accounts",
    }


@pytest.mark.asyncio
async def test_login_unexpected_status():
    """Test a non-200 status aborts the stage."""
    client = AirthingsCloudApiClient(make_session(FakeResponse(status=500, text="boom")))

    with pytest.raises(UnexpectedStatusException) as err:
        await client.async_login("user@example.com", "hunter2")

    assert err.value.status == 500
    assert err.value.stage == STAGE_LOGIN
    assert not isinstance(err.value, AuthException)


@pytest.mark.asyncio
async def test_login_rejected_credentials():
    """Test HTTP 401 is reported as an auth error."""
    client = AirthingsCloudApiClient(make_session(FakeResponse(status=401)))

    with pytest.raises(AuthException):
        await client.async_login("user@example.com", "wrong")


@pytest.mark.asyncio
async def test_login_missing_token():
    """Test a body without access_token aborts the stage."""
    client = AirthingsCloudApiClient(make_session(FakeResponse(payload={"error": "nope"})))

    with pytest.raises(MissingFieldException) as err:
        await client.async_login("user@example.com", "hunter2")

    assert err.value.field == "access_token"


@pytest.mark.asyncio
async def test_login_transport_error():
    """Test connection errors are wrapped with the stage name."""
    session = make_session()
    session.request.side_effect = aiohttp.ClientConnectionError("refused")
    client = AirthingsCloudApiClient(session)

    with pytest.raises(ApiException) as err:
        await client.async_login("user@example.com", "hunter2")

    assert err.value.stage == STAGE_LOGIN
    assert isinstance(err.value.__cause__, aiohttp.ClientConnectionError)


@pytest.mark.asyncio
async def test_request_timeout():
    """Test a timeout is a transport error."""
    client = AirthingsCloudApiClient(
        make_session(FakeResponse(enter_error=asyncio.TimeoutError()))
    )

    with pytest.raises(ApiException):
        await client.async_authenticate("code-1")


@pytest.mark.asyncio
async def test_invalid_json():
    """Test a body that is not JSON is a parse error."""
    client = AirthingsCloudApiClient(
        make_session(FakeResponse(json_error=ValueError("not json")))
    )

    with pytest.raises(ParseException):
        await client.async_login("user@example.com", "hunter2")


@pytest.mark.asyncio
async def test_authorize_success():
    """Test the bearer token is sent and the code extracted."""
    session = make_session(
        FakeResponse(payload={"redirect_uri": "https://dashboard.airthings.com/?code=ABC123&state=xyz"})
    )
    client = AirthingsCloudApiClient(session)

    code = await client.async_authorize("bearer-1")

    assert code == "ABC123"
    args, kwargs = session.request.call_args
    method, url = args
    assert method == "POST"
    assert str(url) == URL_AUTHORIZE
    assert kwargs["headers"]["Authorization"] == "Bearer bearer-1"
    assert kwargs["json"] == {"scope": ["dashboard"]}


@pytest.mark.asyncio
async def test_authorize_keeps_redirect_uri_encoded():
    """Test the authorize query is sent with redirect_uri percent-encoded."""
    session = make_session(
        FakeResponse(payload={"redirect_uri": "https://dashboard.airthings.com/?code=ABC123"})
    )
    client = AirthingsCloudApiClient(session)

    await client.async_authorize("bearer-1")

    url = session.request.call_args.args[1]
    assert isinstance(url, URL)
    assert url.raw_path_qs == (
        "/v1/authorize?client_id=dashboard&redirect_uri=https%3A%2F%2Fdashboard.airthings.com"
    )


@pytest.mark.asyncio
async def test_authorize_missing_redirect_uri():
    """Test a body without redirect_uri is a missing field."""
    client = AirthingsCloudApiClient(make_session(FakeResponse(payload={})))

    with pytest.raises(MissingFieldException) as err:
        await client.async_authorize("bearer-1")

    assert err.value.field == "redirect_uri"


@pytest.mark.asyncio
async def test_authorize_redirect_without_code():
    """Test a 200 response whose redirect lacks a code is its own error."""
    client = AirthingsCloudApiClient(
        make_session(FakeResponse(payload={"redirect_uri": "https://dashboard.airthings.com/"}))
    )

    with pytest.raises(AuthorizationCodeException):
        await client.async_authorize("bearer-1")


@pytest.mark.asyncio
async def test_authenticate_success():
    """Test the code exchange body."""
    session = make_session(FakeResponse(payload={"access_token": "access-1 "}))
    client = AirthingsCloudApiClient(session)

    token = await client.async_authenticate("ABC123")

    assert token == "access-1"
    _, kwargs = session.request.call_args
    assert kwargs["json"] == {
        "grant_type": "authorization_code",
        "client_id": "dashboard",
        "client_secret": DASHBOARD_CLIENT_SECRET,
        "code": "ABC123",
        "redirect_uri": "https://dashboard.airthings.com",
    }


@pytest.mark.asyncio
async def test_fetch_samples_success(sample_body):
    """Test the samples request uses the raw token and the window."""
    session = make_session(FakeResponse(payload=sample_body))
    client = AirthingsCloudApiClient(session)
    window = SampleWindow.around(datetime.datetime(2024, 3, 1, 12, 30, 5))

    body = await client.async_fetch_samples("access-1", "2930000001", window)

    assert body is sample_body
    args, kwargs = session.request.call_args
    assert args == (
        "GET",
        "https://web-api.airthin.gs/v1/devices/2930000001/segments/latest/samples",
    )
    assert kwargs["params"] == {"from": "2024-03-01T11:30:05", "to": "2024-03-01T13:30:05"}
    assert kwargs["headers"]["Authorization"] == "access-1"


@pytest.mark.asyncio
async def test_fetch_samples_missing_sensors():
    """Test a body without sensors aborts the stage."""
    client = AirthingsCloudApiClient(make_session(FakeResponse(payload={"batteryPercentage": "90"})))
    window = SampleWindow.around(datetime.datetime(2024, 3, 1, 12, 0, 0))

    with pytest.raises(MissingFieldException) as err:
        await client.async_fetch_samples("access-1", "2930000001", window)

    assert err.value.stage == STAGE_FETCH_STATISTICS
