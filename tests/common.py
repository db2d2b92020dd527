"""Shared helpers for Airthings Cloud integration tests."""

from __future__ import annotations

from typing import Any, Optional
from unittest.mock import MagicMock


class FakeResponse:
    """Stand-in for an aiohttp response used as ``async with`` target."""

    def __init__(
        self,
        status: int = 200,
        payload: Any = None,
        text: str = "",
        json_error: Optional[Exception] = None,
        enter_error: Optional[Exception] = None,
    ) -> None:
        self.status = status
        self._payload = payload
        self._text = text
        self._json_error = json_error
        self._enter_error = enter_error

    async def __aenter__(self) -> "FakeResponse":
        if self._enter_error is not None:
            raise self._enter_error
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False

    async def text(self) -> str:
        return self._text

    async def json(self, content_type=None) -> Any:
        if self._json_error is not None:
            raise self._json_error
        return self._payload


def make_session(*responses: FakeResponse) -> MagicMock:
    """Return a session whose ``request`` yields ``responses`` in order."""
    session = MagicMock()
    session.request = MagicMock(side_effect=list(responses))
    return session
