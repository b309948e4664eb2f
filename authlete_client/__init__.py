"""Client access layer for the Authlete API.

Usage:
    from authlete_client import get_default_api, RequestOptions

    api = get_default_api()
    api.get_service_configuration(options=RequestOptions({"X-Trace": "1"}))
"""
from .exceptions import (
    AuthleteError,
    AuthleteApiError,
    ConfigurationError,
    ConfigurationNotFoundError,
    ConfigurationParseError,
)
from .config import (
    ApiVersion,
    AuthleteConfiguration,
    ConfigurationResolver,
    load_env_configuration,
)
from .core.api import (
    AuthleteApi,
    AuthleteApiV2,
    AuthleteApiV3,
    RequestOptions,
    TokenStatus,
)
from .core.factory import ApiRegistry, create_api, get_default_api

__all__ = [
    "AuthleteError",
    "AuthleteApiError",
    "ConfigurationError",
    "ConfigurationNotFoundError",
    "ConfigurationParseError",
    "ApiVersion",
    "AuthleteConfiguration",
    "ConfigurationResolver",
    "load_env_configuration",
    "AuthleteApi",
    "AuthleteApiV2",
    "AuthleteApiV3",
    "RequestOptions",
    "TokenStatus",
    "ApiRegistry",
    "create_api",
    "get_default_api",
]
