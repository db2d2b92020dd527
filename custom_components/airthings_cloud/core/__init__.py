"""Core business logic for Airthings Cloud integration.

This package contains the core functionality:
- API client for the dashboard token exchange and samples endpoint
- Poll pipeline driving the stages in order
- Sample parser mapping sensor series onto channels
- Custom exceptions
"""

from .api_client import AirthingsCloudApiClient
from .exceptions import (
    AirthingsException,
    ApiException,
    AuthException,
    AuthorizationCodeException,
    MissingFieldException,
    ParseException,
    UnexpectedStatusException,
)
from .pipeline import AirthingsPollPipeline

__all__ = [
    "AirthingsCloudApiClient",
    "AirthingsPollPipeline",
    "AirthingsException",
    "ApiException",
    "AuthException",
    "AuthorizationCodeException",
    "MissingFieldException",
    "ParseException",
    "UnexpectedStatusException",
]
