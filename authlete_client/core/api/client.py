"""Low-level HTTP client for the Authlete API.

Handles credentials, per-call request options, DPoP proofs and error
mapping. Version-specific paths and credentials live in v2.py and v3.py.
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

import requests

from authlete_client.config.settings import ApiVersion, AuthleteConfiguration
from authlete_client.exceptions import AuthleteApiError
from .dpop import DPOP_HEADER, DpopSigner
from .options import RequestOptions

logger = logging.getLogger(__name__)

# Set by the handle itself; per-call options cannot replace them
RESERVED_HEADERS = frozenset({"accept", "authorization", "content-type"})


@dataclass(frozen=True)
class Settings:
    """Transport settings (seconds)."""
    connect_timeout: float
    read_timeout: float

    @property
    def timeout(self) -> Tuple[float, float]:
        return (self.connect_timeout, self.read_timeout)


class TokenStatus(str, Enum):
    """Filter for the token list API."""
    ALL = "ALL"
    VALID = "VALID"
    INVALID = "INVALID"


def _flag(value: bool) -> str:
    return "true" if value else "false"


class AuthleteApi(ABC):
    """Base Authlete API handle.

    Subclasses provide ``api_version``, a ``PATHS`` table and
    ``_credentials``. Every operation accepts ``options`` (RequestOptions)
    whose headers are sent alongside the defaults for that call only.
    ``Accept``, ``Authorization`` and ``Content-Type`` belong to the handle
    and are never taken from options.

    Usage:
        api = AuthleteApiV3(configuration)
        info = api.get_client(1234, options=RequestOptions({"X-Trace": "1"}))
    """

    api_version: Optional[ApiVersion] = None
    PATHS: Dict[str, str] = {}

    def __init__(self, configuration: AuthleteConfiguration):
        """Initialize the handle.

        Args:
            configuration: Resolved Authlete configuration

        Raises:
            ValueError: If configuration is missing, targets another API
                version, or carries an invalid DPoP key
        """
        if configuration is None:
            raise ValueError("configuration is None.")
        if self.api_version is not None and configuration.api_version != self.api_version:
            raise ValueError(
                f"Configuration must be set to {self.api_version.value} for this implementation."
            )
        self.configuration = configuration
        self.base_url = configuration.base_url.rstrip("/")
        self.settings = Settings(configuration.connect_timeout, configuration.read_timeout)
        # DPoP must be set up before credentials are built
        self._dpop = DpopSigner(configuration.dpop_key) if configuration.dpop_key else None

    @property
    def dpop_enabled(self) -> bool:
        return self._dpop is not None

    @abstractmethod
    def _credentials(self, owner: bool = False) -> Optional[str]:
        """Authorization header value for service (or service owner) APIs."""
        raise NotImplementedError

    def _path(self, name: str, *args) -> str:
        return self.PATHS[name].format(*args)

    # ─────────────────────────────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────────────────────────────
    def call_api(
        self,
        method: str,
        path: str,
        auth: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
        json: Optional[Any] = None,
        options: Optional[RequestOptions] = None,
    ) -> Any:
        """Send one request to the Authlete API.

        Args:
            method: HTTP method
            path: API path appended to the base URL
            auth: Authorization header value (omitted when None)
            params: Query parameters (None values are dropped)
            json: JSON request body
            options: Per-call custom headers (reserved names are skipped)

        Returns:
            Decoded JSON response, or None for an empty body

        Raises:
            AuthleteApiError: On transport failure, HTTP error or bad JSON
        """
        url = f"{self.base_url}{path}"

        if self._dpop is not None:
            # New value; the caller's options stay untouched
            options = (options or RequestOptions()).merged(
                {DPOP_HEADER: self._dpop.proof(method, url)}
            )

        headers = {"Accept": "application/json"}
        if auth:
            headers["Authorization"] = auth
        if options is not None and options.headers is not None:
            for name, value in options.headers.items():
                if name.lower() in RESERVED_HEADERS:
                    logger.debug("Ignoring reserved request header %s", name)
                    continue
                headers[name] = value

        query = {k: v for k, v in (params or {}).items() if v is not None}

        logger.debug("Authlete API %s %s", method, url)
        try:
            resp = requests.request(
                method,
                url,
                params=query or None,
                json=json,
                headers=headers,
                timeout=self.settings.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Authlete API %s %s failed: %s", method, path, exc)
            raise AuthleteApiError(f"{method} {path} failed: {exc}") from exc

        self._handle_error(method, path, resp)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise AuthleteApiError(
                f"{method} {path} returned a non-JSON body",
                resp.status_code,
                resp.reason,
                resp.text,
                dict(resp.headers),
            ) from exc

    def _handle_error(self, method: str, path: str, resp: requests.Response) -> None:
        """Raise AuthleteApiError for 4xx/5xx responses."""
        if resp.status_code >= 400:
            logger.warning("Authlete API %s %s returned HTTP %s", method, path, resp.status_code)
            raise AuthleteApiError(
                f"HTTP {resp.status_code} {resp.reason}",
                resp.status_code,
                resp.reason,
                resp.text,
                dict(resp.headers),
            )

    def _get(self, name: str, *args, params=None, owner: bool = False, options=None) -> Any:
        return self.call_api("GET", self._path(name, *args), self._credentials(owner), params=params, options=options)

    def _post(self, name: str, *args, body=None, owner: bool = False, options=None) -> Any:
        return self.call_api("POST", self._path(name, *args), self._credentials(owner), json=body, options=options)

    def _delete(self, name: str, *args, owner: bool = False, options=None) -> None:
        self.call_api("DELETE", self._path(name, *args), self._credentials(owner), options=options)

    # ─────────────────────────────────────────────────────────────────────
    # Authorization endpoint
    # ─────────────────────────────────────────────────────────────────────
    def authorization(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        """Parse an authorization request (/auth/authorization)."""
        return self._post("auth_authorization", body=request, options=options)

    def authorization_fail(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        return self._post("auth_authorization_fail", body=request, options=options)

    def authorization_issue(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        return self._post("auth_authorization_issue", body=request, options=options)

    # ─────────────────────────────────────────────────────────────────────
    # Token endpoint and token management
    # ─────────────────────────────────────────────────────────────────────
    def token(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        """Process a token request (/auth/token)."""
        return self._post("auth_token", body=request, options=options)

    def token_fail(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        return self._post("auth_token_fail", body=request, options=options)

    def token_issue(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        return self._post("auth_token_issue", body=request, options=options)

    def token_create(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        return self._post("auth_token_create", body=request, options=options)

    def token_update(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        return self._post("auth_token_update", body=request, options=options)

    def get_token_list(
        self,
        client_identifier: Optional[str] = None,
        subject: Optional[str] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
        token_status: TokenStatus = TokenStatus.ALL,
        options: Optional[RequestOptions] = None,
    ) -> Dict:
        """List access tokens, optionally filtered by client, subject and status.

        ``start`` and ``end`` are only sent when both are given.
        """
        params: Dict[str, Any] = {
            "clientIdentifier": client_identifier,
            "subject": subject,
        }
        if start is not None and end is not None:
            params["start"] = start
            params["end"] = end
        params["tokenStatus"] = TokenStatus(token_status).value
        return self._get("auth_token_get_list", params=params, options=options)

    def revocation(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        return self._post("auth_revocation", body=request, options=options)

    # ─────────────────────────────────────────────────────────────────────
    # UserInfo and introspection
    # ─────────────────────────────────────────────────────────────────────
    def userinfo(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        return self._post("auth_userinfo", body=request, options=options)

    def userinfo_issue(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        return self._post("auth_userinfo_issue", body=request, options=options)

    def introspection(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        return self._post("auth_introspection", body=request, options=options)

    def standard_introspection(self, request: Dict, options: Optional[RequestOptions] = None) -> Dict:
        """RFC 7662 introspection (/auth/introspection/standard)."""
        return self._post("auth_introspection_standard", body=request, options=options)

    # ─────────────────────────────────────────────────────────────────────
    # Services
    # ─────────────────────────────────────────────────────────────────────
    def get_service(self, api_key: int, options: Optional[RequestOptions] = None) -> Dict:
        return self._get("service_get", api_key, owner=True, options=options)

    def get_service_list(
        self,
        start: Optional[int] = None,
        end: Optional[int] = None,
        options: Optional[RequestOptions] = None,
    ) -> Dict:
        params = {}
        if start is not None and end is not None:
            params = {"start": start, "end": end}
        return self._get("service_get_list", params=params, owner=True, options=options)

    def get_service_configuration(self, pretty: bool = True, options: Optional[RequestOptions] = None) -> Dict:
        """Fetch the OpenID Provider metadata of the service."""
        return self._get("service_configuration", params={"pretty": _flag(pretty)}, options=options)

    def get_service_jwks(
        self,
        pretty: bool = True,
        include_private_keys: bool = False,
        options: Optional[RequestOptions] = None,
    ) -> Dict:
        params = {"pretty": _flag(pretty), "includePrivateKeys": _flag(include_private_keys)}
        return self._get("service_jwks_get", params=params, options=options)

    # ─────────────────────────────────────────────────────────────────────
    # Clients
    # ─────────────────────────────────────────────────────────────────────
    def get_client(self, client_id, options: Optional[RequestOptions] = None) -> Dict:
        return self._get("client_get", client_id, options=options)

    def get_client_list(
        self,
        developer: Optional[str] = None,
        start: Optional[int] = None,
        end: Optional[int] = None,
        options: Optional[RequestOptions] = None,
    ) -> Dict:
        params: Dict[str, Any] = {"developer": developer}
        if start is not None and end is not None:
            params["start"] = start
            params["end"] = end
        return self._get("client_get_list", params=params, options=options)

    def delete_client(self, client_id, options: Optional[RequestOptions] = None) -> None:
        self._delete("client_delete", client_id, options=options)

    def get_requestable_scopes(self, client_id: int, options: Optional[RequestOptions] = None) -> Optional[List[str]]:
        """Return the client's requestable scopes (None when not configured)."""
        response = self._get("requestable_scopes_get", client_id, options=options)
        return (response or {}).get("requestableScopes")

    def set_requestable_scopes(
        self,
        client_id: int,
        scopes: Optional[List[str]],
        options: Optional[RequestOptions] = None,
    ) -> Optional[List[str]]:
        body = {"requestableScopes": list(scopes) if scopes is not None else None}
        response = self._post("requestable_scopes_update", client_id, body=body, options=options)
        return (response or {}).get("requestableScopes")

    def delete_requestable_scopes(self, client_id: int, options: Optional[RequestOptions] = None) -> None:
        self._delete("requestable_scopes_delete", client_id, options=options)

    # ─────────────────────────────────────────────────────────────────────
    # Misc
    # ─────────────────────────────────────────────────────────────────────
    def echo(self, parameters: Optional[Mapping[str, str]] = None, options: Optional[RequestOptions] = None) -> Dict[str, str]:
        """Call the unauthenticated echo API; it returns the query parameters."""
        return self.call_api("GET", self._path("echo"), None, params=parameters, options=options)
