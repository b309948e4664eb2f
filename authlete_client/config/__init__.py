"""Configuration module for the Authlete client."""
from .settings import (
    ApiVersion,
    AuthleteConfiguration,
    DEFAULT_BASE_URL,
    load_env_configuration,
)
from .resolver import (
    CONFIGURATION_FILE_ENV,
    DEFAULT_CONFIGURATION_FILE,
    ConfigurationResolver,
    load_properties,
)

__all__ = [
    "ApiVersion",
    "AuthleteConfiguration",
    "DEFAULT_BASE_URL",
    "load_env_configuration",
    "CONFIGURATION_FILE_ENV",
    "DEFAULT_CONFIGURATION_FILE",
    "ConfigurationResolver",
    "load_properties",
]
