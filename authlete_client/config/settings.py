"""Authlete connection settings loaded from properties or environment variables."""
from __future__ import annotations
import os
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from authlete_client.exceptions import ConfigurationParseError

DEFAULT_BASE_URL = "https://api.authlete.com"
DEFAULT_TIMEOUT = 5.0

# Property keys recognised in authlete.properties
PROPERTY_KEYS = {
    "base_url": "base_url",
    "api_version": "api_version",
    "service_owner.api_key": "service_owner_api_key",
    "service_owner.api_secret": "service_owner_api_secret",
    "service_owner.access_token": "service_owner_access_token",
    "service.api_key": "service_api_key",
    "service.api_secret": "service_api_secret",
    "service.access_token": "service_access_token",
    "service.dpop_key": "dpop_key",
    "connect_timeout": "connect_timeout",
    "read_timeout": "read_timeout",
}

ENV_KEYS = {
    "AUTHLETE_BASE_URL": "base_url",
    "AUTHLETE_API_VERSION": "api_version",
    "AUTHLETE_SERVICEOWNER_APIKEY": "service_owner_api_key",
    "AUTHLETE_SERVICEOWNER_APISECRET": "service_owner_api_secret",
    "AUTHLETE_SERVICEOWNER_ACCESSTOKEN": "service_owner_access_token",
    "AUTHLETE_SERVICE_APIKEY": "service_api_key",
    "AUTHLETE_SERVICE_APISECRET": "service_api_secret",
    "AUTHLETE_SERVICE_ACCESSTOKEN": "service_access_token",
    "AUTHLETE_DPOP_KEY": "dpop_key",
}


class ApiVersion(str, Enum):
    """Authlete API generations."""
    V2 = "V2"
    V3 = "V3"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ApiVersion":
        """Parse a version string; missing or blank means V2.

        Raises:
            ValueError: If the string names no known version
        """
        if value is None or not value.strip():
            return cls.V2
        return cls(value.strip().upper())


@dataclass(frozen=True)
class AuthleteConfiguration:
    """Connection parameters for the Authlete API.

    Instances are immutable; build them with ``from_properties`` or
    ``load_env_configuration``.
    """
    base_url: str = DEFAULT_BASE_URL
    api_version: ApiVersion = ApiVersion.V2

    # Service owner credentials (service management APIs)
    service_owner_api_key: Optional[str] = None
    service_owner_api_secret: Optional[str] = None
    service_owner_access_token: Optional[str] = None

    # Service credentials (V3 uses service_api_key as the service ID)
    service_api_key: Optional[str] = None
    service_api_secret: Optional[str] = None
    service_access_token: Optional[str] = None

    # JWK used to sign DPoP proofs
    dpop_key: Optional[str] = None

    connect_timeout: float = DEFAULT_TIMEOUT
    read_timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_properties(cls, properties: Mapping[str, Optional[str]], source: Optional[str] = None) -> "AuthleteConfiguration":
        """Build a configuration from parsed property key/value pairs.

        Args:
            properties: Parsed key/value pairs (unknown keys are ignored)
            source: Name of the source, used in error messages

        Returns:
            Configuration instance

        Raises:
            ConfigurationParseError: If a value cannot be interpreted
        """
        values = {
            field_name: properties[key]
            for key, field_name in PROPERTY_KEYS.items()
            if properties.get(key)
        }
        return _build(values, source)


def _parse_timeout(name: str, raw: str, source: Optional[str]) -> float:
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationParseError(f"{name} must be a number, got '{raw}'", source) from None
    if timeout < 0:
        raise ConfigurationParseError(f"{name} cannot be negative", source)
    return timeout


def _build(values: dict, source: Optional[str]) -> AuthleteConfiguration:
    values = {key: value.strip() for key, value in values.items()}

    try:
        values["api_version"] = ApiVersion.parse(values.get("api_version"))
    except ValueError:
        raise ConfigurationParseError(
            f"Unknown api_version '{values['api_version']}' (expected V2 or V3)", source
        ) from None

    for name in ("connect_timeout", "read_timeout"):
        if name in values:
            values[name] = _parse_timeout(name, values[name], source)

    return AuthleteConfiguration(**values)


def load_env_configuration(environ: Optional[Mapping[str, str]] = None) -> AuthleteConfiguration:
    """Load configuration from AUTHLETE_* environment variables."""
    env = os.environ if environ is None else environ
    values = {
        field_name: env[var]
        for var, field_name in ENV_KEYS.items()
        if env.get(var)
    }
    return _build(values, None)
