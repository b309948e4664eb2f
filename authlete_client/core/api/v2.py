"""Authlete API V2 handle (HTTP Basic credentials)."""
from __future__ import annotations
import base64
from typing import Optional

from authlete_client.config.settings import ApiVersion, AuthleteConfiguration
from .client import AuthleteApi


def basic_credentials(key: Optional[str], secret: Optional[str]) -> Optional[str]:
    """Build a Basic Authorization header value, or None without a key."""
    if not key:
        return None
    raw = f"{key}:{secret or ''}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


class AuthleteApiV2(AuthleteApi):
    """Authlete API V2.

    Service management APIs authenticate with the service owner's API key
    and secret; all other APIs use the service's API key and secret.
    """

    api_version = ApiVersion.V2

    PATHS = {
        "auth_authorization": "/api/auth/authorization",
        "auth_authorization_fail": "/api/auth/authorization/fail",
        "auth_authorization_issue": "/api/auth/authorization/issue",
        "auth_token": "/api/auth/token",
        "auth_token_create": "/api/auth/token/create",
        "auth_token_fail": "/api/auth/token/fail",
        "auth_token_get_list": "/api/auth/token/get/list",
        "auth_token_issue": "/api/auth/token/issue",
        "auth_token_update": "/api/auth/token/update",
        "auth_revocation": "/api/auth/revocation",
        "auth_userinfo": "/api/auth/userinfo",
        "auth_userinfo_issue": "/api/auth/userinfo/issue",
        "auth_introspection": "/api/auth/introspection",
        "auth_introspection_standard": "/api/auth/introspection/standard",
        "service_configuration": "/api/service/configuration",
        "service_get": "/api/service/get/{0}",
        "service_get_list": "/api/service/get/list",
        "service_jwks_get": "/api/service/jwks/get",
        "client_delete": "/api/client/delete/{0}",
        "client_get": "/api/client/get/{0}",
        "client_get_list": "/api/client/get/list",
        "requestable_scopes_delete": "/api/client/extension/requestable_scopes/delete/{0}",
        "requestable_scopes_get": "/api/client/extension/requestable_scopes/get/{0}",
        "requestable_scopes_update": "/api/client/extension/requestable_scopes/update/{0}",
        "echo": "/api/misc/echo",
    }

    def __init__(self, configuration: AuthleteConfiguration):
        super().__init__(configuration)
        self._service_owner_auth = basic_credentials(
            configuration.service_owner_api_key, configuration.service_owner_api_secret
        )
        self._service_auth = basic_credentials(
            configuration.service_api_key, configuration.service_api_secret
        )

    def _credentials(self, owner: bool = False) -> Optional[str]:
        return self._service_owner_auth if owner else self._service_auth
