"""HTTP API client for Airthings Cloud integration."""

import asyncio
from typing import Any, Dict, Optional, Union
import logging

import aiohttp
from aiohttp.client import ClientTimeout
from yarl import URL

from ..const import (
    DASHBOARD_CLIENT_ID,
    DASHBOARD_CLIENT_SECRET,
    DASHBOARD_REDIRECT_URI,
    DASHBOARD_SCOPE,
    FIELD_ACCESS_TOKEN,
    FIELD_REDIRECT_URI,
    FIELD_SENSORS,
    LOGIN_CLIENT_ID,
    REQUEST_TIMEOUT,
    URL_AUTHORIZE,
    URL_LATEST_SAMPLES,
    URL_TOKEN,
)
from ..models import SampleWindow
from .exceptions import (
    AirthingsException,
    ApiException,
    AuthException,
    AuthorizationCodeException,
    MissingFieldException,
    ParseException,
    UnexpectedStatusException,
)

_LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT = ClientTimeout(total=REQUEST_TIMEOUT)

# Query is already percent-encoded and must go out as is.
AUTHORIZE_URL = URL(URL_AUTHORIZE, encoded=True)

STAGE_LOGIN = "login"
STAGE_AUTHORIZE = "authorize"
STAGE_AUTHENTICATE = "authenticate"
STAGE_FETCH_STATISTICS = "fetch_statistics"


def extract_authorization_code(redirect_uri: str) -> str:
    """Return the ``code`` query parameter of an authorization redirect.

    Raises:
        AuthorizationCodeException: If the URI carries no code
    """
    try:
        code = URL(redirect_uri).query.get("code")
    except (TypeError, ValueError) as exc:
        raise AuthorizationCodeException(
            f"Malformed redirect URI: {exc}", STAGE_AUTHORIZE
        ) from exc
    if not code:
        raise AuthorizationCodeException(
            "Redirect URI did not contain an authorization code", STAGE_AUTHORIZE
        )
    return code


class AirthingsCloudApiClient:
    """HTTP API client for the Airthings dashboard services.

    Each public coroutine is one stage of the token exchange. None of them
    retries; a failure raises and the caller decides what to do.
    """

    __slots__ = ("_session",)

    def __init__(self, session: aiohttp.ClientSession) -> None:
        """Initialize the API client.

        Args:
            session: aiohttp client session for HTTP requests
        """
        self._session = session

    @staticmethod
    def _require_token(body: Dict[str, Any], stage: str) -> str:
        token = body.get(FIELD_ACCESS_TOKEN)
        if not isinstance(token, str) or not token.strip():
            raise MissingFieldException(
                f"Response did not contain '{FIELD_ACCESS_TOKEN}' (keys: {sorted(body)})",
                stage,
                FIELD_ACCESS_TOKEN,
            )
        return token.strip()

    async def _request(
        self,
        stage: str,
        method: str,
        url: Union[str, URL],
        params: Optional[Dict[str, str]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Make HTTP request to API.

        Args:
            stage: Pipeline stage name, used in errors and logs
            method: HTTP method (GET, POST)
            url: Absolute endpoint URL
            params: Query parameters
            json_body: Request body, sent as JSON
            extra_headers: Additional headers

        Returns:
            Response JSON object

        Raises:
            AuthException: On HTTP 401/403
            UnexpectedStatusException: On any other non-200 status
            ApiException: On transport errors
            ParseException: If the body is not a JSON object
        """
        headers = {"Accept": "application/json"}
        if extra_headers:
            headers.update(extra_headers)

        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("HTTP %s %s (%s)", method, url, stage)

        try:
            async with self._session.request(
                method, url, headers=headers, params=params, json=json_body, timeout=DEFAULT_TIMEOUT
            ) as response:
                if _LOGGER.isEnabledFor(logging.DEBUG):
                    _LOGGER.debug("HTTP %s response: %s", stage, response.status)

                if response.status != 200:
                    resp_text = await response.text()
                    msg = f"Unexpected HTTP status {response.status}: {resp_text[:300]}"
                    if response.status in (401, 403):
                        raise AuthException(msg, stage, response.status)
                    raise UnexpectedStatusException(msg, stage, response.status)

                try:
                    resp_json = await response.json(content_type=None)
                except (aiohttp.ContentTypeError, ValueError) as json_err:
                    raise ParseException(f"Invalid JSON in {stage} response") from json_err

        except AirthingsException:
            raise
        except asyncio.TimeoutError as exc:
            raise ApiException(f"Timeout after {REQUEST_TIMEOUT}s", stage) from exc
        except aiohttp.ClientError as exc:
            raise ApiException(f"{type(exc).__name__}: {exc}", stage) from exc

        if not isinstance(resp_json, dict):
            raise ParseException(
                f"Expected JSON object in {stage} response, got {type(resp_json).__name__}"
            )
        return resp_json

    async def async_login(self, username: str, password: str) -> str:
        """Exchange username and password for a short-lived bearer token."""
        body = await self._request(
            STAGE_LOGIN,
            "POST",
            URL_TOKEN,
            json_body={
                "username": username,
                "password": password,
                "grant_type": "password",
                "client_id": LOGIN_CLIENT_ID,
            },
        )
        token = self._require_token(body, STAGE_LOGIN)
        _LOGGER.debug("Logged in successfully")
        return token

    async def async_authorize(self, bearer_token: str) -> str:
        """Exchange a bearer token for a one-time authorization code."""
        body = await self._request(
            STAGE_AUTHORIZE,
            "POST",
            AUTHORIZE_URL,
            json_body={"scope": list(DASHBOARD_SCOPE)},
            extra_headers={"Authorization": f"Bearer {bearer_token}"},
        )
        redirect_uri = body.get(FIELD_REDIRECT_URI)
        if not isinstance(redirect_uri, str):
            raise MissingFieldException(
                f"Response did not contain '{FIELD_REDIRECT_URI}' (keys: {sorted(body)})",
                STAGE_AUTHORIZE,
                FIELD_REDIRECT_URI,
            )
        code = extract_authorization_code(redirect_uri)
        _LOGGER.debug("Obtained OAuth authorization code")
        return code

    async def async_authenticate(self, authorization_code: str) -> str:
        """Exchange an authorization code for an access token."""
        body = await self._request(
            STAGE_AUTHENTICATE,
            "POST",
            URL_TOKEN,
            json_body={
                "grant_type": "authorization_code",
                "client_id": DASHBOARD_CLIENT_ID,
                "client_secret": DASHBOARD_CLIENT_SECRET,
                "code": authorization_code,
                "redirect_uri": DASHBOARD_REDIRECT_URI,
            },
        )
        token = self._require_token(body, STAGE_AUTHENTICATE)
        _LOGGER.debug("Obtained OAuth access token")
        return token

    async def async_fetch_samples(
        self, access_token: str, device_id: str, window: SampleWindow
    ) -> Dict[str, Any]:
        """Fetch the latest segment samples of a device within ``window``.

        Returns:
            Response body; guaranteed to contain a ``sensors`` key
        """
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug(
                "Fetching samples for %s between %s and %s",
                device_id,
                *window.as_params().values(),
            )
        body = await self._request(
            STAGE_FETCH_STATISTICS,
            "GET",
            URL_LATEST_SAMPLES.format(device_id=device_id),
            params=window.as_params(),
            # The samples endpoint takes the raw token, without a scheme.
            extra_headers={"Authorization": access_token},
        )
        if FIELD_SENSORS not in body:
            raise MissingFieldException(
                f"Response did not contain '{FIELD_SENSORS}' (keys: {sorted(body)})",
                STAGE_FETCH_STATISTICS,
                FIELD_SENSORS,
            )
        return body
