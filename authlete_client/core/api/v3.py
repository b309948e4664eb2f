"""Authlete API V3 handle (access-token credentials, service-scoped paths)."""
from __future__ import annotations
from typing import Optional

from authlete_client.config.settings import ApiVersion, AuthleteConfiguration
from .client import AuthleteApi


class AuthleteApiV3(AuthleteApi):
    """Authlete API V3.

    Every API authenticates with the service access token, as a Bearer token
    or, when a DPoP key is configured, as a DPoP-bound token. The service
    API key doubles as the service ID embedded in paths.
    """

    api_version = ApiVersion.V3

    PATHS = {
        "auth_authorization": "/api/{service_id}/auth/authorization",
        "auth_authorization_fail": "/api/{service_id}/auth/authorization/fail",
        "auth_authorization_issue": "/api/{service_id}/auth/authorization/issue",
        "auth_token": "/api/{service_id}/auth/token",
        "auth_token_create": "/api/{service_id}/auth/token/create",
        "auth_token_fail": "/api/{service_id}/auth/token/fail",
        "auth_token_get_list": "/api/{service_id}/auth/token/get/list",
        "auth_token_issue": "/api/{service_id}/auth/token/issue",
        "auth_token_update": "/api/{service_id}/auth/token/update",
        "auth_revocation": "/api/{service_id}/auth/revocation",
        "auth_userinfo": "/api/{service_id}/auth/userinfo",
        "auth_userinfo_issue": "/api/{service_id}/auth/userinfo/issue",
        "auth_introspection": "/api/{service_id}/auth/introspection",
        "auth_introspection_standard": "/api/{service_id}/auth/introspection/standard",
        "service_configuration": "/api/{service_id}/service/configuration",
        "service_get": "/api/{0}/service/get",
        "service_get_list": "/api/service/get/list",
        "service_jwks_get": "/api/{service_id}/service/jwks/get",
        "client_delete": "/api/{service_id}/client/delete/{0}",
        "client_get": "/api/{service_id}/client/get/{0}",
        "client_get_list": "/api/{service_id}/client/get/list",
        "requestable_scopes_delete": "/api/{service_id}/client/extension/requestable_scopes/delete/{0}",
        "requestable_scopes_get": "/api/{service_id}/client/extension/requestable_scopes/get/{0}",
        "requestable_scopes_update": "/api/{service_id}/client/extension/requestable_scopes/update/{0}",
        "echo": "/api/misc/echo",
    }

    def __init__(self, configuration: AuthleteConfiguration):
        super().__init__(configuration)
        token = configuration.service_access_token
        if not token:
            raise ValueError("V3 API requires an access token, not a key and secret.")
        scheme = "DPoP" if self.dpop_enabled else "Bearer"
        self._auth = f"{scheme} {token}"
        self.service_id = configuration.service_api_key

    def _credentials(self, owner: bool = False) -> Optional[str]:
        return self._auth

    def _path(self, name: str, *args) -> str:
        template = self.PATHS[name]
        if "{service_id}" in template and not self.service_id:
            raise ValueError("service.api_key (the service ID) is required for this API.")
        return template.format(*args, service_id=self.service_id)
