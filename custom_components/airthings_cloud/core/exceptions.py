"""Custom exceptions for Airthings Cloud integration."""

from typing import Optional


class AirthingsException(Exception):
    """Base exception for Airthings Cloud integration."""

    pass


class ApiException(AirthingsException):
    """Exception for API-related errors.

    Raised directly for transport failures (connection errors, timeouts).
    ``stage`` names the pipeline stage that failed.
    """

    def __init__(self, message: str, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage


class UnexpectedStatusException(ApiException):
    """Exception for any non-200 HTTP status."""

    def __init__(self, message: str, stage: Optional[str] = None, status: Optional[int] = None) -> None:
        super().__init__(message, stage)
        self.status = status


class AuthException(UnexpectedStatusException):
    """Exception for authentication errors (HTTP 401/403)."""

    pass


class MissingFieldException(ApiException):
    """Exception for a response body lacking its expected field."""

    def __init__(self, message: str, stage: Optional[str] = None, field: Optional[str] = None) -> None:
        super().__init__(message, stage)
        self.field = field


class AuthorizationCodeException(ApiException):
    """Exception for a redirect URI without an authorization code."""

    pass


class ParseException(AirthingsException):
    """Exception for data parsing errors."""

    pass
